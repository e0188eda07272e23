"""Scope-based DRF permission classes."""

import structlog
from rest_framework.permissions import BasePermission

from core.constants import SCOPE_ADMIN, SCOPE_PRODUCER, SCOPE_USER

logger = structlog.get_logger(__name__)


class _ScopePermission(BasePermission):
    """Grant access when the principal holds any of `required_scopes`."""

    required_scopes: tuple[str, ...] = ()

    def has_permission(self, request, view) -> bool:
        user = request.user
        if user is None or not getattr(user, "is_authenticated", False):
            return False
        if user.has_any_scope(*self.required_scopes):
            return True
        logger.warning(
            "scope_check_failed",
            user_id=user.user_id,
            scopes=user.scopes,
            required=list(self.required_scopes),
            view=type(view).__name__,
        )
        return False


class HasUserScope(_ScopePermission):
    """Owner-facing endpoints: notification:user or notification:admin."""

    message = "Requires notification:user or notification:admin scope"
    required_scopes = (SCOPE_USER, SCOPE_ADMIN)


class HasProducerScope(_ScopePermission):
    """Event ingestion from other workspace modules."""

    message = "Requires notification:producer or notification:admin scope"
    required_scopes = (SCOPE_PRODUCER, SCOPE_ADMIN)


class HasAdminScope(_ScopePermission):
    """Operational endpoints such as manual scheduler runs."""

    message = "Requires notification:admin scope"
    required_scopes = (SCOPE_ADMIN,)
