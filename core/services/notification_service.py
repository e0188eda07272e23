"""Central fan-in/fan-out point for workspace notifications.

Producers call `notify`. The service gates the event against the owner's
preferences, collapses it onto the existing unread row with the same tag,
persists it and hands it to the enabled channels once the transaction
commits. Owners read, acknowledge and delete their notifications through
the remaining methods.
"""

from datetime import datetime, timedelta
from functools import partial
from typing import Any
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

import structlog

from core.enums import DeliveryChannel, NotificationPriority, NotificationType
from core.exceptions import NotificationNotFoundError
from core.models import Notification, NotificationPreference
from core.services.channels import dispatch_channels
from core.services.preference_store import PreferenceStore, preference_store

logger = structlog.get_logger(__name__)

# Concurrent producers can interleave update, insert and mark-read on the
# same tag; each round re-runs the upsert against the fresh state.
MAX_UPSERT_ATTEMPTS = 3


class NotificationService:
    """Gate, de-duplicate, persist and dispatch notifications."""

    def __init__(self, preferences: PreferenceStore | None = None) -> None:
        """Initialize notification service.

        Args:
            preferences: Preference store to gate against.
        """
        self.preferences = preferences or preference_store

    def notify(
        self,
        owner_id: UUID | str,
        type: NotificationType | str,
        tag: str | None,
        title: str,
        body: str = "",
        priority: NotificationPriority | str = NotificationPriority.NORMAL,
        action_url: str | None = None,
        data: dict[str, Any] | None = None,
        channels: list[DeliveryChannel | str] | None = None,
    ) -> Notification | None:
        """Accept an event from a producer.

        1. Suppress entirely when the master switch or the category for
           `type` is off. Nothing is persisted or dispatched.
        2. Upsert on (owner, tag, unread): an unread row with the same tag
           gets its content replaced and `created_at` refreshed, otherwise a
           new row is inserted.
        3. After commit, dispatch to every channel still enabled for this
           category. Dispatch failures never reach the caller.

        Args:
            owner_id: ID of the user to notify.
            type: Producer category of the event.
            tag: Dedupe key. Defaults to "{type}:{data.entityId}" when the
                data names an entity, otherwise a unique tag.
            title: Notification headline.
            body: Notification text.
            priority: low, normal, high or urgent.
            action_url: Where a click navigates to.
            data: Free-form producer context.
            channels: Restrict delivery to these channels.

        Returns:
            The persisted Notification, or None when suppressed.
        """
        notification_type = NotificationType(type)
        priority = NotificationPriority(priority)
        data = dict(data or {})

        preference = self.preferences.get_or_default(owner_id)
        if not preference.enable_notifications:
            logger.info(
                "notification_suppressed",
                owner_id=str(owner_id),
                type=notification_type.value,
                reason="notifications_disabled",
            )
            return None
        if not self.is_category_enabled(preference, notification_type):
            logger.info(
                "notification_suppressed",
                owner_id=str(owner_id),
                type=notification_type.value,
                reason="category_disabled",
            )
            return None

        tag = tag or self.default_tag(notification_type, data)
        values = {
            "type": notification_type.value,
            "title": title,
            "body": body or "",
            "priority": priority.value,
            "action_url": action_url,
            "data": data,
        }
        selected = self.select_channels(
            preference, notification_type, channels, timezone.now()
        )

        with transaction.atomic():
            notification, created = self._upsert(owner_id, tag, values)
            if selected:
                transaction.on_commit(
                    partial(self._dispatch, notification.notification_id, selected)
                )

        logger.info(
            "notification_upserted",
            notification_id=str(notification.notification_id),
            owner_id=str(owner_id),
            type=notification_type.value,
            tag=tag,
            created=created,
            channels=[channel.value for channel in selected],
        )
        return notification

    def _upsert(
        self, owner_id, tag: str, values: dict[str, Any]
    ) -> tuple[Notification, bool]:
        """Replace the unread row for (owner, tag) or insert a new one.

        The partial unique constraint on unread (user, tag) turns a
        concurrent double insert into an IntegrityError, which falls back to
        updating the row the other writer created.

        Returns:
            Tuple of (notification, created).
        """
        unread = Notification.objects.filter(user_id=owner_id, tag=tag, is_read=False)
        last_error: IntegrityError | None = None

        for _ in range(MAX_UPSERT_ATTEMPTS):
            now = timezone.now()
            if unread.update(**values, created_at=now, updated_at=now):
                notification = unread.first()
                if notification is not None:
                    return notification, False
                # Marked read between update and reload; insert instead
            try:
                with transaction.atomic():
                    notification = Notification.objects.create(
                        user_id=owner_id, tag=tag, created_at=now, **values
                    )
                return notification, True
            except IntegrityError as e:
                last_error = e
                logger.debug("notification_upsert_conflict", tag=tag)

        raise last_error  # type: ignore[misc]

    def _dispatch(self, notification_id: UUID, channels: list[DeliveryChannel]) -> None:
        """Commit hook running channel dispatch; swallows and logs everything."""
        try:
            dispatch_channels(notification_id, channels)
        except Exception as e:
            logger.error(
                "notification_dispatch_failed",
                notification_id=str(notification_id),
                error=str(e),
                error_type=type(e).__name__,
            )

    @staticmethod
    def default_tag(notification_type: NotificationType, data: dict[str, Any]) -> str:
        """Per-entity tag when the producer names an entity, else a unique one."""
        entity_id = data.get("entityId")
        if entity_id is not None:
            return f"{notification_type.value}:{entity_id}"
        return f"{notification_type.value}:{uuid4().hex}"

    @staticmethod
    def is_category_enabled(
        preference: NotificationPreference, notification_type: NotificationType
    ) -> bool:
        """Missing category keys count as enabled."""
        return preference.categories.get(notification_type.value, True) is not False

    def select_channels(
        self,
        preference: NotificationPreference,
        notification_type: NotificationType,
        requested: list[DeliveryChannel | str] | None,
        now: datetime,
    ) -> list[DeliveryChannel]:
        """Channels a notification of this type is delivered through.

        A channel survives when its global toggle is on, the per-category
        toggle is not off, the caller did not exclude it and, for push, the
        owner is outside quiet hours.

        Args:
            preference: Owner's preference record.
            notification_type: Category of the notification.
            requested: Caller restriction, None for no restriction.
            now: Reference time for quiet hours.

        Returns:
            Ordered list of channels to dispatch to.
        """
        allowed = None
        if requested is not None:
            allowed = {DeliveryChannel(channel) for channel in requested}
        category_channels = preference.category_channels.get(
            notification_type.value, {}
        )

        selected = []
        for channel in DeliveryChannel:
            if not getattr(preference, f"{channel.value}_enabled"):
                continue
            if category_channels.get(channel.value, True) is False:
                continue
            if allowed is not None and channel not in allowed:
                continue
            if channel is DeliveryChannel.PUSH and self.in_quiet_hours(preference, now):
                continue
            selected.append(channel)
        return selected

    @staticmethod
    def in_quiet_hours(preference: NotificationPreference, now: datetime) -> bool:
        """Whether `now` falls inside the owner's quiet window.

        The window is half-open [start, end) in the owner's timezone and
        wraps past midnight when start is later than end.
        """
        if not preference.quiet_hours_enabled:
            return False
        try:
            zone = ZoneInfo(preference.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("unknown_preference_timezone", timezone=preference.timezone)
            zone = ZoneInfo("UTC")

        local_time = now.astimezone(zone).time()
        start, end = preference.quiet_hours_start, preference.quiet_hours_end
        if start == end:
            return False
        if start < end:
            return start <= local_time < end
        return local_time >= start or local_time < end

    def mark_read(self, notification_id: UUID | str, owner_id) -> Notification:
        """Mark one of the owner's notifications as read.

        Already read notifications are returned unchanged.

        Raises:
            NotificationNotFoundError: Missing or owned by another user.
        """
        notification = self._get_owned(notification_id, owner_id)
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = timezone.now()
            notification.save(update_fields=["is_read", "read_at", "updated_at"])
            logger.info(
                "notification_marked_read",
                notification_id=str(notification.notification_id),
                owner_id=str(owner_id),
            )
        return notification

    def mark_all_read(self, owner_id) -> int:
        """Mark every unread notification of the owner as read.

        Returns:
            Number of rows changed.
        """
        now = timezone.now()
        updated = Notification.objects.filter(user_id=owner_id, is_read=False).update(
            is_read=True, read_at=now, updated_at=now
        )
        logger.info("notifications_marked_read", owner_id=str(owner_id), count=updated)
        return updated

    def list_notifications(
        self,
        owner_id,
        limit: int | None = None,
        offset: int = 0,
        unread_only: bool = False,
        type: NotificationType | str | None = None,
    ) -> tuple[list[Notification], int, int]:
        """Return a most-recent-first page of the owner's notifications.

        Returns:
            Tuple of (page, unread_count, total matching rows).
        """
        if limit is None:
            limit = settings.NOTIFICATION_DEFAULT_PAGE_SIZE
        limit = max(1, min(limit, settings.NOTIFICATION_MAX_PAGE_SIZE))

        queryset = Notification.objects.filter(user_id=owner_id)
        if unread_only:
            queryset = queryset.filter(is_read=False)
        if type:
            queryset = queryset.filter(type=NotificationType(type).value)

        total = queryset.count()
        page = list(queryset.order_by("-created_at")[offset : offset + limit])
        return page, self.unread_count(owner_id), total

    def unread_count(self, owner_id) -> int:
        """Number of unread notifications of the owner."""
        return Notification.objects.filter(user_id=owner_id, is_read=False).count()

    def delete(self, notification_id: UUID | str, owner_id) -> None:
        """Delete one of the owner's notifications.

        Reminders that produced the notification are not touched.

        Raises:
            NotificationNotFoundError: Missing or owned by another user.
        """
        deleted, _ = Notification.objects.filter(
            notification_id=notification_id, user_id=owner_id
        ).delete()
        if not deleted:
            raise NotificationNotFoundError(notification_id)
        logger.info(
            "notification_deleted",
            notification_id=str(notification_id),
            owner_id=str(owner_id),
        )

    def cleanup_read_notifications(self, days: int | None = None) -> int:
        """Delete notifications read more than `days` ago.

        Args:
            days: Retention in days, NOTIFICATION_RETENTION_DAYS by default.

        Returns:
            Number of notifications deleted.
        """
        if days is None:
            days = settings.NOTIFICATION_RETENTION_DAYS
        cutoff = timezone.now() - timedelta(days=days)
        _, per_model = Notification.objects.filter(
            is_read=True, read_at__lt=cutoff
        ).delete()
        deleted = per_model.get(Notification._meta.label, 0)
        logger.info("read_notifications_cleaned_up", deleted=deleted, days=days)
        return deleted

    def send_test_notification(
        self,
        owner_id,
        title: str = "Test Notification",
        body: str = "This is a test notification from Workspace",
    ) -> Notification | None:
        """Send a system notification to the owner through all enabled channels."""
        return self.notify(
            owner_id,
            NotificationType.SYSTEM,
            f"system:test:{uuid4().hex}",
            title,
            body,
            action_url="/notifications",
            data={"test": True},
        )

    def _get_owned(self, notification_id, owner_id) -> Notification:
        try:
            return Notification.objects.get(
                notification_id=notification_id, user_id=owner_id
            )
        except Notification.DoesNotExist as e:
            raise NotificationNotFoundError(notification_id) from e


notification_service = NotificationService()
