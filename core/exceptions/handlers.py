"""DRF exception handler turning domain errors into JSON error bodies."""

import logging
from datetime import UTC, datetime
from http import HTTPStatus
from typing import Any

from django.conf import settings

import structlog
from pydantic import ValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.constants import REQUEST_ID_HEADER
from core.exceptions.domain_exceptions import ConflictError, WorkspaceServiceError
from core.logging.context import get_request_id

logger = structlog.get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal server error occurred."


def custom_exception_handler(
    exc: Exception, context: dict[str, Any]
) -> Response | None:
    """Render every exception raised by a view as a JSON response.

    DRF's own exceptions (authentication, permissions, Http404 and
    PermissionDenied) keep DRF's body. Domain errors, pydantic validation
    errors and anything unexpected get the service's error body:
    `{status, error, message, request_id, timestamp}` plus `detail` for
    conflicts and `errors` for validation failures. Unexpected errors never
    leak their message.

    Args:
        exc: The exception that was raised.
        context: DRF context holding the view and request.

    Returns:
        The error response.
    """
    request_id = get_request_id()
    response = exception_handler(exc, context)
    if response is None:
        status_code, body = _error_body(exc)
        body.update(
            status=status_code,
            request_id=request_id,
            timestamp=datetime.now(UTC).isoformat(),
        )
        response = Response(body, status=status_code)

    if request_id:
        response[REQUEST_ID_HEADER] = request_id

    view = context.get("view")
    _log_exception(exc, getattr(view, "request", None), response.status_code)
    return response


def _error_body(exc: Exception) -> tuple[int, dict[str, Any]]:
    """Status code and body fields for an exception DRF does not know."""
    if isinstance(exc, ConflictError):
        return status.HTTP_409_CONFLICT, {
            "error": "conflict",
            "message": str(exc),
            "detail": exc.detail,
        }
    if isinstance(exc, WorkspaceServiceError):
        return exc.status_code, {
            "error": _error_code(exc.status_code),
            "message": str(exc),
        }
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST, {
            "error": "bad_request",
            "message": "Invalid request parameters",
            "errors": exc.errors(include_url=False, include_context=False),
        }
    return status.HTTP_500_INTERNAL_SERVER_ERROR, {
        "error": "internal_error",
        "message": INTERNAL_ERROR_MESSAGE,
    }


def _error_code(status_code: int) -> str:
    """snake_case reason phrase, e.g. 404 -> not_found."""
    try:
        return HTTPStatus(status_code).phrase.lower().replace(" ", "_")
    except ValueError:
        return "error"


def _log_exception(exc: Exception, request: Any, status_code: int) -> None:
    """Log 4xx at WARNING and 5xx at ERROR, with the traceback in DEBUG."""
    level = logging.WARNING if status_code < 500 else logging.ERROR
    logger.log(
        level,
        "request_failed",
        error_type=type(exc).__name__,
        error=str(exc),
        status_code=status_code,
        method=getattr(request, "method", None),
        path=getattr(request, "path", None),
        exc_info=exc if settings.DEBUG or status_code >= 500 else None,
    )
