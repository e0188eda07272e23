"""Background push worker: event handlers for install, push, click and fetch.

Each handler is a plain function taking the hosting `WorkerScope` and its
event. Handlers are one-shot and independent; the only thing they share is
the `CACHE_NAME` version string. `dispatch` runs a handler to completion,
which is the worker's lifetime extension: the host may suspend the worker
once `dispatch` returns.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from workspace_client.host import (
    FetchRequest,
    FetchResponse,
    NetworkError,
    ShownNotification,
    WindowClient,
    WorkerScope,
)

logger = structlog.get_logger(__name__)

# Bumping the version drops every older cache on the next activation
CACHE_NAME = "workspace-v1"
SHELL_ASSETS = (
    "/",
    "/index.html",
    "/icons/icon-192x192.png",
    "/icons/icon-512x512.png",
)

DEFAULT_TITLE = "Workspace Notification"
DEFAULT_BODY = "You have a new notification"
DEFAULT_ICON = "/icons/icon-192x192.png"
DEFAULT_BADGE = "/icons/badge-72x72.png"
DEFAULT_TAG = "workspace-notification"
DEFAULT_ACTION_URL = "/"
VIBRATION_PATTERN = (100, 50, 100)
API_PATH_PREFIX = "/api/"

OPEN_ACTION = "open"
DISMISS_ACTION = "dismiss"
NOTIFICATION_ACTIONS = (
    {"action": OPEN_ACTION, "title": "Open"},
    {"action": DISMISS_ACTION, "title": "Dismiss"},
)

SKIP_WAITING_MESSAGE = "SKIP_WAITING"


# Events


@dataclass(frozen=True)
class ExtendableEvent:
    """Lifecycle event without payload (install, activate)."""


@dataclass(frozen=True)
class PushEvent:
    """Push message as received from the push service."""

    data: bytes | str | None = None

    def text(self) -> str:
        """Payload decoded as UTF-8 text."""
        if self.data is None:
            return ""
        if isinstance(self.data, bytes):
            return self.data.decode("utf-8", errors="replace")
        return self.data


@dataclass(frozen=True)
class NotificationClickEvent:
    """The user clicked a notification or one of its actions."""

    notification: ShownNotification
    action: str = ""


@dataclass(frozen=True)
class FetchEvent:
    """A request issued by a controlled page."""

    request: FetchRequest


@dataclass(frozen=True)
class MessageEvent:
    """A message posted to the worker by a page."""

    data: Any = field(default=None)


# Push payload


class PushMessageData(BaseModel):
    """Context attached to a pushed notification."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    action_url: str | None = None
    priority: str | None = None
    notification_id: str | None = None
    type: str | None = None
    created_at: str | None = None


class PushMessage(BaseModel):
    """Push payload with the defaults applied to missing or empty fields."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    title: str = DEFAULT_TITLE
    body: str = DEFAULT_BODY
    icon: str = DEFAULT_ICON
    badge: str = DEFAULT_BADGE
    data: PushMessageData = Field(default_factory=PushMessageData)

    @field_validator("title", "body", "icon", "badge", "data", mode="before")
    @classmethod
    def empty_is_default(cls, value, info):
        """Null or empty values fall back to the field default."""
        if value is None or value == "":
            return cls.model_fields[info.field_name].get_default(
                call_default_factory=True
            )
        return value


def parse_push_message(event: PushEvent) -> PushMessage:
    """Parse a push payload, never failing.

    A JSON object is read as a PushMessage. Anything else (plain text,
    invalid JSON, a non-object or fields of the wrong type) keeps the
    default title and uses the raw text as body.
    """
    raw = event.text()
    if not raw.strip():
        return PushMessage()
    try:
        return PushMessage.model_validate_json(raw)
    except ValidationError:
        logger.info("push_payload_not_structured", length=len(raw))
        return PushMessage(body=raw)


def notification_options(message: PushMessage) -> dict[str, Any]:
    """Display options for the OS notification.

    The notification id is the collapse tag, so repeated pushes for the
    same notification replace each other and `renotify` re-alerts the user.
    """
    return {
        "body": message.body,
        "icon": message.icon,
        "badge": message.badge,
        "vibrate": list(VIBRATION_PATTERN),
        "data": message.data.model_dump(by_alias=True, exclude_none=True),
        "actions": [dict(action) for action in NOTIFICATION_ACTIONS],
        "requireInteraction": message.data.priority == "urgent",
        "tag": message.data.notification_id or DEFAULT_TAG,
        "renotify": True,
    }


# Handlers


def on_install(scope: WorkerScope, _event: ExtendableEvent) -> list[str]:
    """Pre-cache the app shell and activate without waiting.

    Any asset failing to download fails the install, like `cache.addAll`.

    Returns:
        URLs stored in the cache.
    """
    scope.skip_waiting()
    cache = scope.caches.open(CACHE_NAME)
    responses = []
    for asset in SHELL_ASSETS:
        url = scope.resolve(asset)
        response = scope.fetch(FetchRequest(url=url))
        if not response.ok:
            raise NetworkError(f"Shell asset {url} returned {response.status}")
        responses.append((url, response))
    for url, response in responses:
        cache.put(url, response)
    logger.info("push_worker_installed", cache=CACHE_NAME, assets=len(responses))
    return [url for url, _ in responses]


def on_activate(scope: WorkerScope, _event: ExtendableEvent) -> list[str]:
    """Drop caches of other versions and take control of open windows.

    Returns:
        Names of the deleted caches.
    """
    stale = [name for name in scope.caches.keys() if name != CACHE_NAME]
    for name in stale:
        scope.caches.delete(name)
    scope.clients.claim()
    logger.info("push_worker_activated", cache=CACHE_NAME, deleted_caches=stale)
    return stale


def on_push(scope: WorkerScope, event: PushEvent) -> ShownNotification:
    """Show an OS notification for a push message."""
    message = parse_push_message(event)
    notification = scope.registration.show_notification(
        message.title, notification_options(message)
    )
    logger.info(
        "push_notification_shown",
        tag=notification.tag,
        priority=message.data.priority,
    )
    return notification


def on_notification_click(
    scope: WorkerScope, event: NotificationClickEvent
) -> WindowClient | None:
    """Close the notification and bring the app to its action URL.

    An open window on the app's origin is focused and, unless the target is
    the root, navigated. Otherwise a new window is opened.

    Returns:
        The focused or opened window, or None when dismissed.
    """
    event.notification.close()
    if event.action == DISMISS_ACTION:
        return None

    action_url = event.notification.data.get("actionUrl") or DEFAULT_ACTION_URL
    for window in scope.clients.match_all():
        if scope.is_same_origin(window.url):
            window.focus()
            if action_url != DEFAULT_ACTION_URL:
                window.navigate(action_url)
            return window
    return scope.clients.open_window(action_url)


def on_fetch(scope: WorkerScope, event: FetchEvent) -> FetchResponse | None:
    """Network-first with offline fallback for the app shell.

    API calls and non-GET requests are not intercepted (None), so API
    responses are never served from or written to the cache.

    Raises:
        NetworkError: The network failed and nothing is cached for the URL.
    """
    request = event.request
    if request.method.upper() != "GET" or request.path.startswith(API_PATH_PREFIX):
        return None

    try:
        response = scope.fetch(request)
    except NetworkError:
        cached = scope.caches.match(request.url)
        if cached is None:
            raise
        logger.debug("push_worker_served_from_cache", url=request.url)
        return cached

    if response.ok:
        scope.caches.open(CACHE_NAME).put(request.url, response.clone())
    return response


def on_message(scope: WorkerScope, event: MessageEvent) -> bool:
    """Handle control messages from pages.

    Returns:
        True when the message was a SKIP_WAITING request.
    """
    if isinstance(event.data, dict) and event.data.get("type") == SKIP_WAITING_MESSAGE:
        scope.skip_waiting()
        return True
    return False


HANDLERS: dict[str, Callable[[WorkerScope, Any], Any]] = {
    "install": on_install,
    "activate": on_activate,
    "push": on_push,
    "notificationclick": on_notification_click,
    "fetch": on_fetch,
    "message": on_message,
}


def dispatch(scope: WorkerScope, event_name: str, event: Any) -> Any:
    """Run the handler for `event_name` to completion and return its result.

    Raises:
        KeyError: If no handler exists for the event.
    """
    try:
        handler = HANDLERS[event_name]
    except KeyError:
        logger.warning("push_worker_unknown_event", event_name=event_name)
        raise
    return handler(scope, event)
