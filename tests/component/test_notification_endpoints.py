"""Component tests for the owner-facing notification endpoints."""

from datetime import timedelta
from uuid import uuid4

from django.utils import timezone

from core.constants import SCOPE_PRODUCER
from core.models import Notification
from tests.base import BaseComponentTest
from tests.factories import create_notification, create_user

BASE_URL = "/api/v1/workspace/notifications"


class TestNotificationListEndpoint(BaseComponentTest):
    """GET /notifications."""

    def setUp(self):
        """Set up notifications for two owners."""
        super().setUp()
        now = timezone.now()
        self.oldest = create_notification(
            self.user, created_at=now - timedelta(hours=2), type="bill"
        )
        self.read = create_notification(
            self.user,
            created_at=now - timedelta(hours=1),
            is_read=True,
            read_at=now,
        )
        self.newest = create_notification(self.user, created_at=now)
        create_notification(create_user())

    def test_lists_own_notifications_newest_first(self):
        """Test that only own notifications are listed, newest first."""
        response = self.client.get(BASE_URL, headers=self.auth())

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(
            [n["id"] for n in body["notifications"]],
            [
                str(self.newest.notification_id),
                str(self.read.notification_id),
                str(self.oldest.notification_id),
            ],
        )
        self.assertEqual(body["unreadCount"], 2)
        self.assertEqual(body["total"], 3)
        self.assertIn("actionUrl", body["notifications"][0])
        self.assertIn("isRead", body["notifications"][0])

    def test_unread_only_and_type_filters(self):
        """Test the unread-only and type filters."""
        response = self.client.get(
            BASE_URL, {"unreadOnly": "true", "type": "bill"}, headers=self.auth()
        )

        body = response.json()
        self.assertEqual(
            [n["id"] for n in body["notifications"]],
            [str(self.oldest.notification_id)],
        )
        self.assertEqual(body["total"], 1)
        self.assertEqual(body["unreadCount"], 2)

    def test_paging(self):
        """Test limit and offset paging."""
        response = self.client.get(
            BASE_URL, {"limit": 1, "offset": 1}, headers=self.auth()
        )

        body = response.json()
        self.assertEqual(len(body["notifications"]), 1)
        self.assertEqual(body["notifications"][0]["id"], str(self.read.notification_id))
        self.assertEqual(body["total"], 3)

    def test_invalid_query_returns_400(self):
        """Test that an invalid query returns 400."""
        for params in ({"limit": 0}, {"offset": -1}, {"type": "carrier-pigeon"}):
            with self.subTest(params=params):
                response = self.client.get(BASE_URL, params, headers=self.auth())

                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()["error"], "bad_request")

    def test_requires_token(self):
        """Test that the endpoint requires a token."""
        response = self.client.get(BASE_URL)

        self.assertEqual(response.status_code, 401)

    def test_producer_scope_is_not_enough(self):
        """Test that the producer scope cannot read the inbox."""
        response = self.client.get(BASE_URL, headers=self.auth(SCOPE_PRODUCER))

        self.assertEqual(response.status_code, 403)

    def test_unread_count(self):
        """Test the unread count endpoint."""
        response = self.client.get(f"{BASE_URL}/unread-count", headers=self.auth())

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"count": 2})


class TestNotificationReadEndpoints(BaseComponentTest):
    """PUT /notifications/{id}/read, PUT /notifications/read-all, DELETE."""

    def test_mark_read(self):
        """Test marking a notification as read."""
        notification = create_notification(self.user)

        response = self.client.put(
            f"{BASE_URL}/{notification.notification_id}/read", headers=self.auth()
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["isRead"])
        self.assertIsNotNone(body["readAt"])

    def test_mark_read_twice_keeps_read_at(self):
        """Test that marking read twice keeps the first read time."""
        notification = create_notification(self.user)
        url = f"{BASE_URL}/{notification.notification_id}/read"

        first = self.client.put(url, headers=self.auth()).json()
        second = self.client.put(url, headers=self.auth()).json()

        self.assertEqual(first["readAt"], second["readAt"])

    def test_other_owners_notification_is_not_found(self):
        """Test that another owner's notification is not found."""
        notification = create_notification(create_user())

        response = self.client.put(
            f"{BASE_URL}/{notification.notification_id}/read", headers=self.auth()
        )

        self.assertEqual(response.status_code, 404)
        notification.refresh_from_db()
        self.assertFalse(notification.is_read)

    def test_unknown_notification_is_not_found(self):
        """Test that an unknown notification id returns 404."""
        response = self.client.put(f"{BASE_URL}/{uuid4()}/read", headers=self.auth())

        self.assertEqual(response.status_code, 404)

    def test_mark_all_read_resets_badge(self):
        """Marking everything read leaves zero unread and keeps the rows."""
        for _ in range(3):
            create_notification(self.user)
        create_notification(self.user, is_read=True, read_at=timezone.now())
        other = create_notification(create_user())

        response = self.client.put(f"{BASE_URL}/read-all", headers=self.auth())

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"updated": 3})
        count = self.client.get(f"{BASE_URL}/unread-count", headers=self.auth())
        self.assertEqual(count.json()["count"], 0)
        self.assertEqual(Notification.objects.filter(user=self.user).count(), 4)
        other.refresh_from_db()
        self.assertFalse(other.is_read)

    def test_delete(self):
        """Test deleting a notification."""
        notification = create_notification(self.user)

        response = self.client.delete(
            f"{BASE_URL}/{notification.notification_id}", headers=self.auth()
        )

        self.assertEqual(response.status_code, 204)
        self.assertFalse(
            Notification.objects.filter(pk=notification.notification_id).exists()
        )

    def test_delete_other_owners_notification(self):
        """Test that another owner's notification cannot be deleted."""
        notification = create_notification(create_user())

        response = self.client.delete(
            f"{BASE_URL}/{notification.notification_id}", headers=self.auth()
        )

        self.assertEqual(response.status_code, 404)
        self.assertTrue(
            Notification.objects.filter(pk=notification.notification_id).exists()
        )


class TestNotificationTestEndpoint(BaseComponentTest):
    """POST /notifications/test."""

    def test_sends_test_notification_to_caller(self):
        """Test that the test notification goes to the caller."""
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(
                f"{BASE_URL}/test",
                {"title": "Ping"},
                content_type="application/json",
                headers=self.auth(),
            )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["title"], "Ping")
        self.assertEqual(response.json()["type"], "system")
        self.assertTrue(
            Notification.objects.filter(user=self.user, title="Ping").exists()
        )
