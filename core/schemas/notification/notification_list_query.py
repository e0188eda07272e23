"""Query parameters of the notification list endpoint."""

from django.conf import settings

from pydantic import Field, field_validator

from core.enums import NotificationType
from core.schemas.base_schema_model import BaseSchemaModel


def _default_limit() -> int:
    return settings.NOTIFICATION_DEFAULT_PAGE_SIZE


class NotificationListQuery(BaseSchemaModel):
    """Validated `limit`, `offset`, `unreadOnly` and `type` parameters."""

    limit: int = Field(default_factory=_default_limit, ge=1, le=100)
    offset: int = Field(0, ge=0)
    unread_only: bool = False
    type: NotificationType | None = None

    @field_validator("type", mode="before")
    @classmethod
    def blank_type_is_none(cls, value):
        """Treat `?type=` as no filter."""
        return value or None
