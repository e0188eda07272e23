"""Web push subscription model."""

import hashlib
from typing import ClassVar

from django.db import models


def hash_endpoint(endpoint: str) -> str:
    """Return the sha256 hex digest used as the endpoint's unique key."""
    return hashlib.sha256(endpoint.encode("utf-8")).hexdigest()


class PushSubscription(models.Model):
    """A browser's push endpoint registered by a user.

    Endpoints can be longer than an indexable varchar, so uniqueness is
    enforced on `endpoint_hash`. A subscription the push service reports as
    gone is deleted; one that keeps failing is deactivated.
    """

    user = models.ForeignKey(
        "core.User",
        on_delete=models.CASCADE,
        related_name="push_subscriptions",
        db_column="user_id",
    )
    endpoint = models.TextField()
    endpoint_hash = models.CharField(max_length=64, unique=True)
    p256dh = models.CharField(max_length=255, help_text="Public key for encryption")
    auth = models.CharField(max_length=255, help_text="Auth secret for encryption")
    user_agent = models.CharField(max_length=500, null=True, blank=True)
    device_name = models.CharField(max_length=100, null=True, blank=True)
    is_active = models.BooleanField(default=True)
    last_used_at = models.DateTimeField(null=True, blank=True)
    failure_count = models.PositiveIntegerField(default=0)
    last_failure_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Django model metadata."""

        db_table = "push_subscriptions"
        ordering: ClassVar[list[str]] = ["-created_at"]
        indexes: ClassVar[list] = [
            models.Index(fields=["user", "is_active"]),
        ]

    def __str__(self) -> str:
        """Return string representation of the subscription."""
        return f"Push subscription {self.pk} for user {self.user_id}"

    def as_subscription_info(self) -> dict:
        """Return the subscription in the shape web push libraries expect."""
        return {
            "endpoint": self.endpoint,
            "keys": {"p256dh": self.p256dh, "auth": self.auth},
        }
