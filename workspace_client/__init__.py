"""Client-side half of workspace notifications.

The push worker renders pushed notifications on the device; the
notification center polls, merges and acknowledges them in the app.
"""

from workspace_client.api import WorkspaceApiClient
from workspace_client.cache_storage import InMemoryCacheStorage
from workspace_client.exceptions import (
    ApiUnavailableError,
    SessionExpiredError,
    WorkspaceClientError,
)
from workspace_client.host import WorkerScope
from workspace_client.notification_center import NotificationCenter
from workspace_client.polling import PollingTask
from workspace_client.presentation import (
    PRIORITY_STYLES,
    SNOOZE_MENU,
    TYPE_PRESENTATION,
    SnoozeChoice,
    badge_label,
)
from workspace_client.push_worker import HANDLERS, dispatch
from workspace_client.session import ClientSession, SessionManager

__all__ = [
    "HANDLERS",
    "PRIORITY_STYLES",
    "SNOOZE_MENU",
    "TYPE_PRESENTATION",
    "ApiUnavailableError",
    "ClientSession",
    "InMemoryCacheStorage",
    "NotificationCenter",
    "PollingTask",
    "SessionExpiredError",
    "SessionManager",
    "SnoozeChoice",
    "WorkerScope",
    "WorkspaceApiClient",
    "WorkspaceClientError",
    "badge_label",
    "dispatch",
]
