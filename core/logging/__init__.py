"""Logging utilities for the workspace notification service."""

from core.logging.config import cleanup_old_logs, setup_logging
from core.logging.context import (
    clear_request_context,
    get_owner_id,
    get_request_id,
    set_owner_id,
    set_request_id,
)

__all__ = [
    "cleanup_old_logs",
    "clear_request_context",
    "get_owner_id",
    "get_request_id",
    "set_owner_id",
    "set_request_id",
    "setup_logging",
]
