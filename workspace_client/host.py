"""Hosting environment of the push worker.

Handlers never touch globals. Everything they may act on (caches, open
windows, the notification registration, the network) is reached through
the `WorkerScope` they are dispatched with, so a browser bridge or a test
can supply its own implementations.
"""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

import requests
import structlog

if TYPE_CHECKING:
    from workspace_client.cache_storage import InMemoryCacheStorage

logger = structlog.get_logger(__name__)


class NetworkError(Exception):
    """The network request could not be completed."""


@dataclass(frozen=True)
class FetchRequest:
    """Outgoing request intercepted by the worker."""

    url: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def path(self) -> str:
        """Path component of the URL."""
        return urlsplit(self.url).path or "/"


@dataclass(frozen=True)
class FetchResponse:
    """Response body and metadata, immutable so cached copies stay intact."""

    url: str
    status: int
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the response may be stored in the offline cache."""
        return self.status < 400

    def clone(self) -> "FetchResponse":
        """Independent copy for storing while the original is returned."""
        return replace(self, headers=dict(self.headers))


def requests_fetch(request: FetchRequest, timeout: float = 10) -> FetchResponse:
    """Perform a request over the network with `requests`.

    Raises:
        NetworkError: When no response was received.
    """
    try:
        response = requests.request(
            request.method, request.url, headers=request.headers, timeout=timeout
        )
    except requests.RequestException as e:
        raise NetworkError(str(e)) from e
    return FetchResponse(
        url=request.url,
        status=response.status_code,
        body=response.content,
        headers=dict(response.headers),
    )


@dataclass
class ShownNotification:
    """An OS notification displayed by the worker."""

    title: str
    options: dict[str, Any]
    closed: bool = False

    @property
    def data(self) -> dict[str, Any]:
        """Context attached to the notification (actionUrl, priority...)."""
        return self.options.get("data") or {}

    @property
    def tag(self) -> str | None:
        """Collapse key of the notification."""
        return self.options.get("tag")

    def close(self) -> None:
        """Remove the notification from the OS tray."""
        self.closed = True


class Registration:
    """Notification surface of the worker registration.

    A notification with the tag of one still shown replaces it.
    """

    def __init__(self) -> None:
        """Initialize with no notifications shown."""
        self._shown: dict[str, ShownNotification] = {}
        self._untagged: list[ShownNotification] = []

    def show_notification(
        self, title: str, options: dict[str, Any]
    ) -> ShownNotification:
        """Display (or replace) an OS notification."""
        notification = ShownNotification(title=title, options=options)
        tag = options.get("tag")
        if tag:
            self._shown[tag] = notification
        else:
            self._untagged.append(notification)
        return notification

    def get_notifications(self) -> list[ShownNotification]:
        """Notifications still displayed."""
        shown = [*self._shown.values(), *self._untagged]
        return [n for n in shown if not n.closed]


@dataclass
class WindowClient:
    """An open application window."""

    url: str
    focused: bool = False
    navigations: list[str] = field(default_factory=list)

    def focus(self) -> None:
        """Bring the window to the front."""
        self.focused = True

    def navigate(self, url: str) -> None:
        """Load `url` in this window."""
        self.navigations.append(url)
        self.url = url


class Clients:
    """Windows the worker can find, focus, open and control."""

    def __init__(self, windows: list[WindowClient] | None = None):
        """Initialize with the currently open windows."""
        self.windows = list(windows or [])
        self.claimed = False

    def match_all(self) -> list[WindowClient]:
        """All open windows, controlled or not."""
        return list(self.windows)

    def open_window(self, url: str) -> WindowClient:
        """Open a new window at `url`."""
        window = WindowClient(url=url, focused=True)
        self.windows.append(window)
        return window

    def claim(self) -> None:
        """Take control of already-open windows."""
        self.claimed = True


@dataclass
class WorkerScope:
    """Everything a push worker handler may act on."""

    origin: str
    caches: "InMemoryCacheStorage"
    clients: Clients = field(default_factory=Clients)
    registration: Registration = field(default_factory=Registration)
    fetch: Callable[[FetchRequest], FetchResponse] = requests_fetch
    waiting_skipped: bool = False

    def skip_waiting(self) -> None:
        """Activate this worker without waiting for old instances to close."""
        self.waiting_skipped = True

    def resolve(self, path: str) -> str:
        """Absolute URL of a path on the worker's origin."""
        return f"{self.origin.rstrip('/')}/{path.lstrip('/')}"

    def is_same_origin(self, url: str) -> bool:
        """Whether a URL belongs to the worker's origin."""
        target, origin = urlsplit(url), urlsplit(self.origin)
        return (target.scheme, target.netloc) == (origin.scheme, origin.netloc)
