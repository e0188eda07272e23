"""Notification model for user-facing notification data.

Delivery tracking per channel lives in NotificationDelivery.
"""

import uuid
from typing import ClassVar

from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.enums import NotificationPriority, NotificationType


class Notification(models.Model):
    """A single notification in a user's in-app list.

    At most one unread row exists per (user, tag). A repeated event with the
    same tag replaces the content of that unread row instead of inserting a
    new one. `is_read` only ever goes from False to True.

    Attributes:
        notification_id: Unique identifier for the notification.
        user: Owner of the notification.
        type: Producer category (reminder, bill, post-published, ...).
        tag: Stable dedupe key, e.g. "reminder:42:1704099600".
        title: Short headline.
        body: Message text.
        priority: low, normal, high or urgent.
        action_url: Where a click on the notification navigates to.
        data: Free-form producer context, e.g. {"reminderId": 42}.
        is_read: Whether the owner has read this notification.
        read_at: When it was marked read.
        created_at: When the current content was produced. Reset on upsert.
        updated_at: When the row was last written.
    """

    notification_id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the notification",
    )
    user = models.ForeignKey(
        "core.User",
        on_delete=models.CASCADE,
        related_name="notifications",
        db_column="user_id",
        help_text="Owner of the notification",
    )
    type = models.CharField(
        max_length=30,
        choices=[(t.value, t.value) for t in NotificationType],
        help_text="Producer category of the notification",
    )
    tag = models.CharField(
        max_length=255,
        help_text="Dedupe key; one unread row per user and tag",
    )
    title = models.CharField(max_length=255)
    body = models.TextField(default="", blank=True)
    priority = models.CharField(
        max_length=10,
        choices=[(p.value, p.value) for p in NotificationPriority],
        default=NotificationPriority.NORMAL.value,
    )
    action_url = models.CharField(max_length=500, null=True, blank=True)
    data = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(
        default=False,
        help_text="Whether the notification has been read by the user",
    )
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(
        default=timezone.now,
        help_text="When the current content was produced",
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Django model metadata."""

        db_table = "notifications"
        ordering: ClassVar[list[str]] = ["-created_at"]
        constraints: ClassVar[list] = [
            models.UniqueConstraint(
                fields=["user", "tag"],
                condition=Q(is_read=False),
                name="uniq_unread_notification_per_tag",
            ),
        ]
        indexes: ClassVar[list] = [
            models.Index(fields=["user", "-created_at"]),
            models.Index(fields=["user", "is_read", "-created_at"]),
            models.Index(fields=["is_read", "read_at"]),
        ]

    def __str__(self) -> str:
        """Return string representation of notification."""
        return f"{self.type} for user {self.user_id}"

    def __repr__(self) -> str:
        """Return detailed representation of notification."""
        return (
            f"<Notification(id={self.notification_id}, "
            f"tag={self.tag}, "
            f"user={self.user_id}, "
            f"is_read={self.is_read})>"
        )
