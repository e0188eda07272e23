"""Component tests for the push subscription endpoints."""

from django.test import override_settings

from core.models import PushSubscription
from tests.base import BaseComponentTest
from tests.factories import create_push_subscription, create_user

BASE_URL = "/api/v1/workspace/notifications"
ENDPOINT = "https://fcm.googleapis.com/fcm/send/device-1"


class TestPushSubscriptionEndpoints(BaseComponentTest):
    """VAPID key, subscribe, unsubscribe and device list."""

    def _subscribe(self, endpoint=ENDPOINT, **extra):
        body = {"endpoint": endpoint, "keys": {"p256dh": "key", "auth": "secret"}}
        body.update(extra)
        return self.client.post(
            f"{BASE_URL}/subscribe",
            body,
            content_type="application/json",
            headers={**self.auth(), "User-Agent": "Firefox/125.0"},
        )

    def test_vapid_key(self):
        """Test the VAPID public key endpoint."""
        response = self.client.get(f"{BASE_URL}/vapid-key", headers=self.auth())

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"publicKey": "test-public-key"})

    @override_settings(WEBPUSH_VAPID_PUBLIC_KEY="", WEBPUSH_VAPID_PRIVATE_KEY="")
    def test_vapid_key_not_configured(self):
        """Test the VAPID key endpoint when push is not configured."""
        response = self.client.get(f"{BASE_URL}/vapid-key", headers=self.auth())

        self.assertEqual(response.status_code, 503)

    def test_subscribe(self):
        """Test subscribing a device."""
        response = self._subscribe(deviceName="Work laptop")

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["deviceName"], "Work laptop")
        self.assertEqual(body["userAgent"], "Firefox/125.0")
        self.assertTrue(body["isActive"])
        self.assertNotIn("endpoint", body)
        self.assertNotIn("keys", body)

    def test_resubscribe_keeps_one_row(self):
        """Test that resubscribing keeps a single row."""
        self._subscribe()
        self._subscribe()

        self.assertEqual(PushSubscription.objects.filter(user=self.user).count(), 1)

    def test_subscribe_requires_keys(self):
        """Test that a subscription without keys is rejected."""
        response = self.client.post(
            f"{BASE_URL}/subscribe",
            {"endpoint": ENDPOINT},
            content_type="application/json",
            headers=self.auth(),
        )

        self.assertEqual(response.status_code, 400)

    def test_unsubscribe(self):
        """Test unsubscribing by endpoint."""
        self._subscribe()

        response = self.client.post(
            f"{BASE_URL}/unsubscribe",
            {"endpoint": ENDPOINT},
            content_type="application/json",
            headers=self.auth(),
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"removed": True})
        self.assertFalse(PushSubscription.objects.filter(user=self.user).exists())

    def test_list_and_delete_devices(self):
        """Test listing and deleting devices."""
        subscription = create_push_subscription(self.user)
        create_push_subscription(create_user())

        listed = self.client.get(f"{BASE_URL}/subscriptions", headers=self.auth())
        deleted = self.client.delete(
            f"{BASE_URL}/subscriptions/{subscription.id}", headers=self.auth()
        )

        self.assertEqual([s["id"] for s in listed.json()], [subscription.id])
        self.assertEqual(deleted.status_code, 204)

    def test_delete_other_owners_device(self):
        """Test that another owner's device cannot be deleted."""
        subscription = create_push_subscription(create_user())

        response = self.client.delete(
            f"{BASE_URL}/subscriptions/{subscription.id}", headers=self.auth()
        )

        self.assertEqual(response.status_code, 404)
        self.assertTrue(PushSubscription.objects.filter(pk=subscription.id).exists())
