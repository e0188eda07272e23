"""Exception handling utilities for the workspace notification service."""

from core.exceptions.domain_exceptions import (
    ConflictError,
    InvalidReminderOperationError,
    NotificationNotFoundError,
    PushNotConfiguredError,
    PushSubscriptionNotFoundError,
    ReminderNotFoundError,
    ResourceNotFoundError,
    WorkspaceServiceError,
)
from core.exceptions.handlers import custom_exception_handler

__all__ = [
    "ConflictError",
    "InvalidReminderOperationError",
    "NotificationNotFoundError",
    "PushNotConfiguredError",
    "PushSubscriptionNotFoundError",
    "ReminderNotFoundError",
    "ResourceNotFoundError",
    "WorkspaceServiceError",
    "custom_exception_handler",
]
