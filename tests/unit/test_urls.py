"""Unit tests for URL configuration."""

from uuid import uuid4

from django.test import SimpleTestCase
from django.urls import Resolver404, resolve, reverse

from core import views


class TestCoreURLPatterns(SimpleTestCase):
    """Routing of the workspace API."""

    def test_fixed_routes_win_over_notification_id(self):
        """Test that fixed routes win over a notification id."""
        cases = {
            "/api/v1/workspace/notifications/unread-count": views.UnreadCountView,
            "/api/v1/workspace/notifications/read-all": views.NotificationReadAllView,
            "/api/v1/workspace/notifications/preferences": (
                views.NotificationPreferenceView
            ),
            "/api/v1/workspace/notifications/events": views.NotificationEventView,
            "/api/v1/workspace/notifications/vapid-key": views.VapidKeyView,
        }
        for url, view in cases.items():
            with self.subTest(url=url):
                self.assertEqual(resolve(url).func.cls, view)

    def test_notification_routes_take_uuids(self):
        """Test that notification routes take UUIDs."""
        notification_id = uuid4()

        resolved = resolve(f"/api/v1/workspace/notifications/{notification_id}/read")

        self.assertEqual(resolved.func.cls, views.NotificationReadView)
        self.assertEqual(resolved.kwargs["notification_id"], notification_id)
        with self.assertRaises(Resolver404):
            resolve("/api/v1/workspace/notifications/42/read")

    def test_reminder_routes(self):
        """Test the reminder routes."""
        self.assertEqual(
            reverse("reminder-snooze", kwargs={"reminder_id": 7}),
            "/api/v1/workspace/reminders/7/snooze",
        )
        self.assertEqual(
            resolve("/api/v1/workspace/reminders/7/complete").func.cls,
            views.ReminderCompleteView,
        )

    def test_health_routes(self):
        """Test the health routes."""
        self.assertEqual(reverse("health-live"), "/api/v1/workspace/health/live")
        self.assertEqual(reverse("health-ready"), "/api/v1/workspace/health/ready")

    def test_unknown_path(self):
        """Test that an unknown path does not resolve."""
        with self.assertRaises(Resolver404):
            resolve("/api/v1/notification/health/")
