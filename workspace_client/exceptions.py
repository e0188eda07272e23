"""Exceptions raised by the workspace client."""


class WorkspaceClientError(Exception):
    """Request to the workspace notification API failed."""

    def __init__(self, message: str, status_code: int | None = None):
        """Initialize client error.

        Args:
            message: Error message
            status_code: HTTP status code, if a response was received
        """
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class SessionExpiredError(WorkspaceClientError):
    """No valid session: never logged in, logged out, expired or rejected (401)."""

    def __init__(self, message: str = "Session expired, please log in again"):
        """Initialize session error."""
        super().__init__(message, status_code=401)


class ApiUnavailableError(WorkspaceClientError):
    """Server error or unreachable API (5xx)."""
