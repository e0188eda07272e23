"""HTTP client for the workspace notification API."""

from datetime import datetime
from typing import Any

import requests
import structlog

from workspace_client.exceptions import (
    ApiUnavailableError,
    SessionExpiredError,
    WorkspaceClientError,
)
from workspace_client.presentation import SnoozeChoice
from workspace_client.session import ClientSession, SessionManager

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10


class WorkspaceApiClient:
    """Thin wrapper over the REST endpoints used by the client components.

    Every call takes the caller's `ClientSession` explicitly. A 401 clears
    the session held by the manager so the UI can send the user to login.
    """

    def __init__(
        self,
        base_url: str,
        sessions: SessionManager,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http: requests.Session | None = None,
    ):
        """Initialize API client.

        Args:
            base_url: API root, e.g. https://app.example.com/api/v1/workspace
            sessions: Manager cleared when the API rejects the token
            timeout: Request timeout in seconds
            http: Optional requests session for connection reuse
        """
        self.base_url = base_url.rstrip("/")
        self.sessions = sessions
        self.timeout = timeout
        self.http = http or requests.Session()

    def _request(
        self,
        session: ClientSession,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and decode the JSON body.

        Returns:
            Decoded JSON, or None for 204 responses.

        Raises:
            SessionExpiredError: On 401.
            ApiUnavailableError: On 5xx or connection failure.
            WorkspaceClientError: On any other 4xx.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = {"Accept": "application/json", **session.auth_headers()}
        try:
            response = self.http.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("api_request_failed", method=method, url=url, error=str(e))
            raise ApiUnavailableError(f"Request to {url} failed: {e}") from e

        if response.status_code == 401:
            self.sessions.clear("unauthorized")
            raise SessionExpiredError()
        if response.status_code >= 500:
            raise ApiUnavailableError(
                f"API returned {response.status_code}", response.status_code
            )
        if response.status_code >= 400:
            raise WorkspaceClientError(
                _error_message(response), status_code=response.status_code
            )
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Notifications

    def list_notifications(
        self,
        session: ClientSession,
        limit: int = 20,
        offset: int = 0,
        unread_only: bool = False,
        type: str | None = None,
    ) -> dict[str, Any]:
        """Return `{notifications, unreadCount, total}`."""
        params: dict[str, Any] = {"limit": limit, "offset": offset}
        if unread_only:
            params["unreadOnly"] = "true"
        if type:
            params["type"] = type
        return self._request(session, "GET", "notifications", params=params)

    def unread_count(self, session: ClientSession) -> int:
        """Return the number of unread notifications."""
        return self._request(session, "GET", "notifications/unread-count")["count"]

    def mark_read(self, session: ClientSession, notification_id: str) -> dict:
        """Mark one notification as read."""
        return self._request(session, "PUT", f"notifications/{notification_id}/read")

    def mark_all_read(self, session: ClientSession) -> int:
        """Mark every notification as read and return how many changed."""
        return self._request(session, "PUT", "notifications/read-all")["updated"]

    def delete_notification(self, session: ClientSession, notification_id: str) -> None:
        """Delete one notification."""
        self._request(session, "DELETE", f"notifications/{notification_id}")

    def get_preferences(self, session: ClientSession) -> dict[str, Any]:
        """Return the preference record."""
        return self._request(session, "GET", "notifications/preferences")

    def update_preferences(
        self, session: ClientSession, changes: dict[str, Any]
    ) -> dict[str, Any]:
        """Apply a partial preference update and return the full record."""
        return self._request(
            session, "PUT", "notifications/preferences", json_data=changes
        )

    # Push subscriptions

    def get_vapid_key(self, session: ClientSession) -> str:
        """Return the server's application server key."""
        return self._request(session, "GET", "notifications/vapid-key")["publicKey"]

    def subscribe(
        self,
        session: ClientSession,
        subscription: dict[str, Any],
        device_name: str | None = None,
    ) -> dict[str, Any]:
        """Register a serialized browser PushSubscription."""
        body = {**subscription}
        if device_name:
            body["deviceName"] = device_name
        return self._request(session, "POST", "notifications/subscribe", json_data=body)

    def unsubscribe(self, session: ClientSession, endpoint: str) -> bool:
        """Remove the subscription for an endpoint."""
        result = self._request(
            session,
            "POST",
            "notifications/unsubscribe",
            json_data={"endpoint": endpoint},
        )
        return bool(result and result.get("removed"))

    # Reminders

    def list_reminders(
        self, session: ClientSession, status: str = "all"
    ) -> dict[str, Any]:
        """Return `{reminders, total}` filtered by pending, completed or all."""
        return self._request(session, "GET", "reminders", params={"status": status})

    def create_reminder(
        self, session: ClientSession, reminder: dict[str, Any]
    ) -> dict[str, Any]:
        """Create a reminder."""
        return self._request(session, "POST", "reminders", json_data=reminder)

    def complete_reminder(self, session: ClientSession, reminder_id: int) -> dict:
        """Mark a reminder completed."""
        return self._request(session, "POST", f"reminders/{reminder_id}/complete")

    def snooze_reminder(
        self,
        session: ClientSession,
        reminder_id: int,
        until: datetime | SnoozeChoice,
    ) -> dict:
        """Snooze until an aware datetime, or for an entry of SNOOZE_MENU."""
        if isinstance(until, SnoozeChoice):
            body = {"minutes": until.minutes}
        else:
            body = {"until": until.isoformat()}
        return self._request(
            session, "POST", f"reminders/{reminder_id}/snooze", json_data=body
        )

    def delete_reminder(self, session: ClientSession, reminder_id: int) -> None:
        """Delete a reminder."""
        self._request(session, "DELETE", f"reminders/{reminder_id}")


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"API returned {response.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"API returned {response.status_code}"
