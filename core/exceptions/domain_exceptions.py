"""Domain exceptions raised by the notification and reminder services."""


class WorkspaceServiceError(Exception):
    """Base exception carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        """Initialize service error.

        Args:
            message: Error message
            status_code: HTTP status code override
        """
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ResourceNotFoundError(WorkspaceServiceError):
    """Resource is missing or owned by somebody else (404).

    The message never distinguishes the two cases so callers cannot probe
    for another user's data.
    """

    status_code = 404
    resource_name = "Resource"

    def __init__(self, resource_id: object):
        """Initialize not found error.

        Args:
            resource_id: Identifier that was looked up
        """
        self.resource_id = resource_id
        super().__init__(f"{self.resource_name} with ID {resource_id} not found")


class NotificationNotFoundError(ResourceNotFoundError):
    """Notification not found for the requesting owner."""

    resource_name = "Notification"


class ReminderNotFoundError(ResourceNotFoundError):
    """Reminder not found for the requesting owner."""

    resource_name = "Reminder"


class PushSubscriptionNotFoundError(ResourceNotFoundError):
    """Push subscription not found for the requesting owner."""

    resource_name = "Push subscription"


class InvalidReminderOperationError(WorkspaceServiceError):
    """Reminder operation rejected because of its arguments (400)."""

    status_code = 400


class ConflictError(WorkspaceServiceError):
    """Conflict error for operations that cannot be performed (409)."""

    status_code = 409

    def __init__(self, message: str, detail: str | None = None):
        """Initialize conflict error.

        Args:
            message: Error message
            detail: Additional details about the conflict
        """
        self.detail = detail
        super().__init__(message)


class PushNotConfiguredError(WorkspaceServiceError):
    """Web push keys are not configured on this deployment (503)."""

    status_code = 503

    def __init__(self, message: str = "Push notifications not configured"):
        """Initialize push configuration error.

        Args:
            message: Error message
        """
        super().__init__(message)
