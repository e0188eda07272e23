"""Tests for NotificationService."""

from datetime import UTC, datetime, time, timedelta
from unittest.mock import patch
from uuid import uuid4

from django.db.models import QuerySet
from django.utils import timezone

import pytest

from core.enums import DeliveryChannel, NotificationType
from core.exceptions import NotificationNotFoundError
from core.models import Notification, NotificationPreference
from core.services.notification_service import NotificationService
from tests.factories import create_notification, create_preference


@pytest.fixture
def service():
    """Create NotificationService instance."""
    return NotificationService()


def _preference(**kwargs) -> NotificationPreference:
    return NotificationPreference(user_id=uuid4(), **kwargs)


@pytest.mark.django_db
class TestNotify:
    """Gating, de-duplication and dispatch of producer events."""

    def test_creates_unread_notification(self, service, user):
        """Test that notify creates an unread notification."""
        notification = service.notify(
            user.user_id,
            NotificationType.BILL,
            "bill:7",
            "Invoice due",
            "Invoice #7 is due tomorrow",
            priority="high",
            action_url="/bills/7",
            data={"billId": 7},
        )

        assert notification.is_read is False
        assert notification.type == "bill"
        assert notification.priority == "high"
        assert notification.data == {"billId": 7}

    def test_same_tag_replaces_unread_row(self, service, user):
        """Test that the same tag replaces the unread row."""
        first = service.notify(user.user_id, "bill", "bill:7", "Due tomorrow")
        second = service.notify(user.user_id, "bill", "bill:7", "Due today")

        assert second.notification_id == first.notification_id
        assert second.title == "Due today"
        assert second.created_at >= first.created_at
        assert Notification.objects.filter(user=user).count() == 1

    def test_concurrent_insert_falls_back_to_update(self, service, user):
        """Test an insert racing ours is updated instead of duplicated."""
        real_update = QuerySet.update
        competing = {}

        def update_then_race(queryset, **kwargs):
            updated = real_update(queryset, **kwargs)
            if queryset.model is Notification and not competing:
                competing["row"] = create_notification(
                    user, tag="bill:7", title="Other writer"
                )
            return updated

        with patch.object(QuerySet, "update", update_then_race):
            notification = service.notify(user.user_id, "bill", "bill:7", "Due today")

        unread = Notification.objects.filter(user=user, tag="bill:7", is_read=False)
        assert unread.count() == 1
        assert notification.notification_id == competing["row"].notification_id
        assert unread.get().title == "Due today"

    def test_same_tag_after_read_creates_new_row(self, service, user):
        """Test that the same tag after a read creates a new row."""
        first = service.notify(user.user_id, "bill", "bill:7", "Due tomorrow")
        service.mark_read(first.notification_id, user.user_id)

        second = service.notify(user.user_id, "bill", "bill:7", "Due today")

        assert second.notification_id != first.notification_id
        assert Notification.objects.filter(user=user).count() == 2

    def test_same_tag_for_different_owners_is_independent(
        self, service, user, other_user
    ):
        """Test that tags are independent across owners."""
        service.notify(user.user_id, "system", "system:maintenance", "Downtime")
        service.notify(other_user.user_id, "system", "system:maintenance", "Downtime")

        assert Notification.objects.count() == 2

    def test_default_tag_from_entity_id(self, service, user):
        """Test the default tag derived from the entity id."""
        data = {"entityId": 3}
        first = service.notify(user.user_id, "goal-progress", None, "50%", data=data)
        second = service.notify(user.user_id, "goal-progress", None, "75%", data=data)

        assert first.tag == "goal-progress:3"
        assert second.notification_id == first.notification_id

    def test_default_tag_without_entity_is_unique(self, service, user):
        """Test that the default tag without an entity is unique."""
        first = service.notify(user.user_id, "custom", None, "Hello")
        second = service.notify(user.user_id, "custom", None, "Hello")

        assert first.tag != second.tag

    def test_master_switch_suppresses_everything(self, service, user):
        """Test that the master switch suppresses everything."""
        create_preference(user, enable_notifications=False)

        result = service.notify(user.user_id, "bill", "bill:1", "Invoice")

        assert result is None
        assert not Notification.objects.exists()

    def test_disabled_category_suppresses_persistence(self, service, user):
        """Test that a disabled category is never persisted."""
        create_preference(user, categories={"bill": False})

        assert service.notify(user.user_id, "bill", "bill:1", "Invoice") is None
        assert service.notify(user.user_id, "system", "system:1", "Hi") is not None

    def test_rejects_unknown_type(self, service, user):
        """Test that an unknown type is rejected."""
        with pytest.raises(ValueError):
            service.notify(user.user_id, "newsletter", None, "Hi")

    def test_dispatches_enabled_channels_after_commit(
        self, service, user, django_capture_on_commit_callbacks
    ):
        """Test that enabled channels are dispatched after commit."""
        with patch(
            "core.services.notification_service.dispatch_channels"
        ) as dispatch, django_capture_on_commit_callbacks(execute=True):
            notification = service.notify(user.user_id, "bill", "bill:1", "Invoice")

        dispatch.assert_called_once_with(
            notification.notification_id,
            [DeliveryChannel.PUSH, DeliveryChannel.BROWSER],
        )

    def test_no_dispatch_before_commit(
        self, service, user, django_capture_on_commit_callbacks
    ):
        """Test that nothing is dispatched before commit."""
        with patch(
            "core.services.notification_service.dispatch_channels"
        ) as dispatch, django_capture_on_commit_callbacks(execute=False) as callbacks:
            service.notify(user.user_id, "bill", "bill:1", "Invoice")

        dispatch.assert_not_called()
        assert len(callbacks) == 1

    def test_dispatch_failure_never_reaches_producer(
        self, service, user, django_capture_on_commit_callbacks
    ):
        """Test that a dispatch failure never reaches the producer."""
        with patch(
            "core.services.notification_service.dispatch_channels",
            side_effect=RuntimeError("redis down"),
        ), django_capture_on_commit_callbacks(execute=True):
            notification = service.notify(user.user_id, "bill", "bill:1", "Invoice")

        assert Notification.objects.filter(pk=notification.pk).exists()

    def test_send_test_notification(self, service, user):
        """Test sending the test notification."""
        notification = service.send_test_notification(user.user_id)

        assert notification.type == NotificationType.SYSTEM.value
        assert notification.tag.startswith("system:test:")
        assert notification.data == {"test": True}


class TestChannelSelection:
    """Channel gating against preference records."""

    NOON = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)

    def test_defaults_select_push_and_browser(self, service):
        """Test that the defaults select push and browser."""
        channels = service.select_channels(
            _preference(), NotificationType.BILL, None, self.NOON
        )

        assert channels == [DeliveryChannel.PUSH, DeliveryChannel.BROWSER]

    def test_email_when_enabled(self, service):
        """Test that email is selected when enabled."""
        channels = service.select_channels(
            _preference(email_enabled=True), NotificationType.BILL, None, self.NOON
        )

        assert DeliveryChannel.EMAIL in channels

    def test_per_category_channel_toggle(self, service):
        """Test the per-category channel toggle."""
        preference = _preference(category_channels={"bill": {"push": False}})

        bill = service.select_channels(
            preference, NotificationType.BILL, None, self.NOON
        )
        system = service.select_channels(
            preference, NotificationType.SYSTEM, None, self.NOON
        )

        assert bill == [DeliveryChannel.BROWSER]
        assert DeliveryChannel.PUSH in system

    def test_caller_restriction(self, service):
        """Test that the caller can restrict channels."""
        channels = service.select_channels(
            _preference(email_enabled=True),
            NotificationType.REMINDER,
            ["browser"],
            self.NOON,
        )

        assert channels == [DeliveryChannel.BROWSER]

    def test_quiet_hours_drop_push_only(self, service):
        """Test that quiet hours drop only push."""
        preference = _preference(
            quiet_hours_enabled=True,
            quiet_hours_start=time(11, 0),
            quiet_hours_end=time(13, 0),
        )

        channels = service.select_channels(
            preference, NotificationType.BILL, None, self.NOON
        )

        assert channels == [DeliveryChannel.BROWSER]


class TestQuietHours:
    """Quiet window evaluation in the owner's timezone."""

    def _at(self, hour, minute=0, tz="UTC", start=time(22, 0), end=time(7, 0)):
        preference = _preference(
            quiet_hours_enabled=True,
            quiet_hours_start=start,
            quiet_hours_end=end,
            timezone=tz,
        )
        now = datetime(2024, 6, 1, hour, minute, tzinfo=UTC)
        return NotificationService.in_quiet_hours(preference, now)

    def test_window_wrapping_midnight(self):
        """Test a window wrapping midnight."""
        assert self._at(23) is True
        assert self._at(3) is True
        assert self._at(12) is False

    def test_window_is_half_open(self):
        """Test that the window is half open."""
        assert self._at(22, 0) is True
        assert self._at(7, 0) is False

    def test_same_day_window(self):
        """Test a window within one day."""
        assert self._at(10, start=time(9, 0), end=time(17, 0)) is True
        assert self._at(18, start=time(9, 0), end=time(17, 0)) is False

    def test_evaluated_in_owner_timezone(self):
        """Test that the window uses the owner's timezone."""
        # 20:00 UTC is 22:00 in Berlin during summer time
        assert self._at(20, tz="Europe/Berlin") is True
        assert self._at(20, tz="UTC") is False

    def test_unknown_timezone_falls_back_to_utc(self):
        """Test that an unknown timezone falls back to UTC."""
        assert self._at(23, tz="Mars/Olympus") is True

    def test_disabled(self):
        """Test disabled quiet hours."""
        preference = _preference(quiet_hours_enabled=False)

        assert NotificationService.in_quiet_hours(preference, timezone.now()) is False


@pytest.mark.django_db
class TestReadAndDelete:
    """Owner operations on persisted notifications."""

    def test_mark_read(self, service, user):
        """Test marking a notification as read."""
        notification = create_notification(user)

        result = service.mark_read(notification.notification_id, user.user_id)

        assert result.is_read is True
        assert result.read_at is not None

    def test_mark_read_twice_keeps_read_at(self, service, user):
        """Test that marking read twice keeps the read time."""
        notification = create_notification(user)
        first = service.mark_read(notification.notification_id, user.user_id)
        second = service.mark_read(notification.notification_id, user.user_id)

        assert second.read_at == first.read_at

    def test_mark_read_of_other_owner_is_not_found(self, service, user, other_user):
        """Test that another owner's notification is not found."""
        notification = create_notification(other_user)

        with pytest.raises(NotificationNotFoundError):
            service.mark_read(notification.notification_id, user.user_id)
        notification.refresh_from_db()
        assert notification.is_read is False

    def test_mark_all_read_counts_changed_rows(self, service, user, other_user):
        """Test that mark all read counts the changed rows."""
        for _ in range(3):
            create_notification(user)
        create_notification(user, is_read=True, read_at=timezone.now())
        create_notification(other_user)

        updated = service.mark_all_read(user.user_id)

        assert updated == 3
        assert service.unread_count(user.user_id) == 0
        assert service.unread_count(other_user.user_id) == 1

    def test_list_is_most_recent_first_with_counters(self, service, user):
        """Test most recent first listing with counters."""
        now = timezone.now()
        old = create_notification(user, created_at=now - timedelta(hours=2))
        new = create_notification(user, created_at=now)
        read = create_notification(
            user, created_at=now - timedelta(hours=1), is_read=True
        )

        page, unread, total = service.list_notifications(user.user_id)

        assert page == [new, read, old]
        assert unread == 2
        assert total == 3

    def test_list_filters_and_paging(self, service, user):
        """Test list filters and paging."""
        now = timezone.now()
        for minutes in range(5):
            create_notification(
                user, type="bill", created_at=now - timedelta(minutes=minutes)
            )
        create_notification(user, type="system", is_read=True)

        page, _, total = service.list_notifications(
            user.user_id, limit=2, offset=1, unread_only=True, type="bill"
        )

        assert total == 5
        assert len(page) == 2
        assert all(n.type == "bill" for n in page)

    def test_list_clamps_limit(self, service, user, settings):
        """Test that the list limit is clamped."""
        settings.NOTIFICATION_MAX_PAGE_SIZE = 2
        for _ in range(3):
            create_notification(user)

        page, _, _ = service.list_notifications(user.user_id, limit=50)

        assert len(page) == 2

    def test_delete(self, service, user):
        """Test deleting a notification."""
        notification = create_notification(user)

        service.delete(notification.notification_id, user.user_id)

        assert not Notification.objects.filter(pk=notification.pk).exists()

    def test_delete_other_owner_is_not_found(self, service, user, other_user):
        """Test that another owner's notification cannot be deleted."""
        notification = create_notification(other_user)

        with pytest.raises(NotificationNotFoundError):
            service.delete(notification.notification_id, user.user_id)

    def test_cleanup_deletes_only_old_read_rows(self, service, user):
        """Test that cleanup deletes only old read rows."""
        now = timezone.now()
        old_read = create_notification(
            user, is_read=True, read_at=now - timedelta(days=40)
        )
        recent_read = create_notification(
            user, is_read=True, read_at=now - timedelta(days=2)
        )
        old_unread = create_notification(user, created_at=now - timedelta(days=90))

        deleted = service.cleanup_read_notifications(days=30)

        assert deleted == 1
        remaining = set(Notification.objects.values_list("pk", flat=True))
        assert old_read.pk not in remaining
        assert {recent_read.pk, old_unread.pk} <= remaining
