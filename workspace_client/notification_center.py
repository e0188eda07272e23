"""Foreground notification center: poll, merge, acknowledge.

Polling and push are two independent channels for the same rows, with no
ordering between them, so local state is reconciled by notification id
rather than by arrival order. Mutations are optimistic: the local view
changes first and a failing request is only logged; the next poll brings
the view back in line with the server.
"""

import threading
import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import requests
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from workspace_client.api import WorkspaceApiClient
from workspace_client.exceptions import SessionExpiredError, WorkspaceClientError
from workspace_client.polling import DEFAULT_POLL_INTERVAL_SECONDS, PollingTask
from workspace_client.presentation import (
    PriorityStyle,
    TypePresentation,
    badge_label,
    format_time_ago,
    presentation_for,
    priority_style,
)
from workspace_client.session import SessionManager

logger = structlog.get_logger(__name__)

DEFAULT_PAGE_SIZE = 20

# Errors of a single request; anything else is a bug and propagates
_REQUEST_ERRORS = (WorkspaceClientError, requests.RequestException)


class NotificationItem(BaseModel):
    """Notification row as held in the local view."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    id: str
    type: str = "custom"
    tag: str | None = None
    title: str
    body: str = ""
    priority: str = "normal"
    action_url: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    is_read: bool = False
    created_at: datetime

    @property
    def presentation(self) -> TypePresentation:
        """Icon and colour for this row's type."""
        return presentation_for(self.type)

    @property
    def style(self) -> PriorityStyle:
        return priority_style(self.priority)

    def time_ago(self, now: datetime | None = None) -> str:
        return format_time_ago(self.created_at, now)


class NotificationCenter:
    """Local view of the user's notifications and unread counter.

    The unread counter is clamped at zero on every local change and replaced
    by the server's count after each successful poll.
    """

    def __init__(
        self,
        api: WorkspaceApiClient,
        sessions: SessionManager,
        navigate: Callable[[str], None] | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
    ):
        """Initialize an empty center.

        Args:
            api: Client for the notification endpoints.
            sessions: Source of the session passed to every call.
            navigate: Called with the action URL when a row is clicked.
            limit: Page size fetched by each poll.
            poll_interval: Seconds between polls while visible.
        """
        self.api = api
        self.sessions = sessions
        self.navigate = navigate
        self.limit = limit
        self._items: dict[str, NotificationItem] = {}
        # monotonic time a row arrived through push, until a poll confirms it
        self._pushed_at: dict[str, float] = {}
        self._unread_count = 0
        self._lock = threading.RLock()
        self._poller = PollingTask(
            self.refresh, interval=poll_interval, name="NotificationCenterPoll"
        )

    # Lifecycle

    def mount(self) -> None:
        """Start polling: once now, then every interval while visible."""
        self._poller.start()

    def unmount(self) -> None:
        """Stop polling. No poll starts after this returns."""
        self._poller.stop()

    def set_visible(self, visible: bool) -> None:
        """Pause polling while the view is hidden."""
        self._poller.set_visible(visible)

    # State

    @property
    def notifications(self) -> list[NotificationItem]:
        """Rows most recent first."""
        with self._lock:
            items = list(self._items.values())
        return sorted(items, key=lambda item: item.created_at, reverse=True)

    @property
    def unread_count(self) -> int:
        """Unread counter shown on the badge; never negative."""
        return self._unread_count

    @property
    def badge(self) -> str | None:
        """Badge text for the counter, e.g. "99+"."""
        return badge_label(self._unread_count)

    def get(self, notification_id: str) -> NotificationItem | None:
        """Row with the given id, if present."""
        with self._lock:
            return self._items.get(notification_id)

    # Polling

    def refresh(self) -> bool:
        """Fetch the latest page and merge it into the local view.

        Returns:
            Whether the poll succeeded.
        """
        started = time.monotonic()
        try:
            session = self.sessions.require()
            page = self.api.list_notifications(session, limit=self.limit)
        except SessionExpiredError:
            logger.info("notification_poll_stopped", reason="session_expired")
            self._poller.stop()
            return False
        except _REQUEST_ERRORS as e:
            logger.warning("notification_poll_failed", error=str(e))
            return False

        try:
            rows = [
                NotificationItem.model_validate(row)
                for row in page.get("notifications", [])
            ]
        except ValidationError as e:
            logger.warning("notification_poll_invalid_page", error=str(e))
            return False
        self.merge(rows, int(page.get("unreadCount", 0)), polled_at=started)
        return True

    def merge(
        self,
        rows: list[NotificationItem],
        unread_count: int,
        polled_at: float | None = None,
    ) -> None:
        """Reconcile a server page with the local view.

        - A row that arrived by push is provisional: the first page that
          returns its id replaces it, unless the push is a newer version
          delivered while the poll was in flight.
        - Otherwise a server row with a newer `createdAt` wins outright and
          a newer local copy is kept.
        - On the same version, and when a provisional row is replaced, a
          local read flag survives, since the server may not have seen the
          read yet.
        - Local rows missing from the page are kept only while provisional
          and pushed after the poll was sent (or, for a merge without poll
          timing, newer than every row on the page). Anything else was
          deleted or aged out on the server.
        - The server's unread count replaces the local counter.
        """
        with self._lock:
            merged: dict[str, NotificationItem] = {}
            for row in rows:
                local = self._items.get(row.id)
                if local is None:
                    merged[row.id] = row
                    continue
                in_flight = self._pushed_during(row.id, polled_at)
                if row.created_at > local.created_at:
                    merged[row.id] = row
                elif row.created_at == local.created_at or (
                    row.id in self._pushed_at and not in_flight
                ):
                    merged[row.id] = row.model_copy(
                        update={"is_read": row.is_read or local.is_read}
                    )
                else:
                    merged[row.id] = local
                    continue
                self._pushed_at.pop(row.id, None)

            newest = max((row.created_at for row in rows), default=None)
            for notification_id, local in self._items.items():
                if notification_id in merged:
                    continue
                if notification_id in self._pushed_at and (
                    self._pushed_during(notification_id, polled_at)
                    or (
                        polled_at is None
                        and (newest is None or local.created_at > newest)
                    )
                ):
                    merged[notification_id] = local
                else:
                    self._pushed_at.pop(notification_id, None)

            self._items = merged
            self._unread_count = max(0, unread_count)

    def _pushed_during(self, notification_id: str, polled_at: float | None) -> bool:
        """Whether a push for the row arrived after the poll was sent."""
        pushed_at = self._pushed_at.get(notification_id)
        if pushed_at is None or polled_at is None:
            return False
        return pushed_at >= polled_at

    def ingest_push(self, payload: dict[str, Any]) -> NotificationItem | None:
        """Add a row delivered by push ahead of the next poll.

        The row keeps the server's `createdAt` carried in the payload, so
        the next poll reconciles it like any other version of the row. A
        push for an unread row already shown replaces its content in place
        (same tag semantics as the server). Pushes without a notification
        id cannot be reconciled and are ignored.
        """
        data = payload.get("data") or {}
        notification_id = data.get("notificationId")
        if not notification_id:
            return None

        try:
            item = NotificationItem(
                id=str(notification_id),
                type=data.get("type") or "custom",
                title=payload.get("title") or "",
                body=payload.get("body") or "",
                priority=data.get("priority") or "normal",
                action_url=data.get("actionUrl"),
                data=data,
                created_at=data.get("createdAt") or datetime.now(UTC),
            )
        except ValidationError as e:
            logger.warning("notification_push_invalid", error=str(e))
            return None
        with self._lock:
            existing = self._items.get(item.id)
            if existing is not None and existing.is_read:
                return existing
            self._items[item.id] = item
            self._pushed_at[item.id] = time.monotonic()
            if existing is None:
                self._unread_count += 1
        return item

    # Mutations

    def mark_read(self, notification_id: str) -> None:
        """Flip a row to read locally, then tell the server."""
        with self._lock:
            item = self._items.get(notification_id)
            if item is None or item.is_read:
                return
            self._items[notification_id] = item.model_copy(update={"is_read": True})
            self._unread_count = max(0, self._unread_count - 1)

        self._send("mark_read", self.api.mark_read, notification_id)

    def mark_all_read(self) -> None:
        """Flip every row to read and reset the counter, then tell the server."""
        with self._lock:
            self._items = {
                key: item.model_copy(update={"is_read": True})
                for key, item in self._items.items()
            }
            self._unread_count = 0

        self._send("mark_all_read", self.api.mark_all_read)

    def delete(self, notification_id: str) -> None:
        """Remove a row locally, then tell the server."""
        with self._lock:
            item = self._items.pop(notification_id, None)
            self._pushed_at.pop(notification_id, None)
            if item is not None and not item.is_read:
                self._unread_count = max(0, self._unread_count - 1)

        self._send("delete", self.api.delete_notification, notification_id)

    def click(self, notification_id: str) -> str | None:
        """Mark a row read and navigate to its action URL, if it has one.

        Returns:
            The action URL navigated to, or None.
        """
        item = self.get(notification_id)
        if item is None:
            return None
        self.mark_read(notification_id)
        if item.action_url and self.navigate is not None:
            self.navigate(item.action_url)
        return item.action_url

    def _send(self, operation: str, call: Callable[..., Any], *args: Any) -> None:
        """Run a server mutation; failures are logged and never rolled back."""
        try:
            call(self.sessions.require(), *args)
        except _REQUEST_ERRORS as e:
            logger.warning(
                "notification_sync_failed",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
            )
