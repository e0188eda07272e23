"""NotificationDelivery model for per-channel delivery tracking."""

from typing import ClassVar

from django.db import models
from django.utils import timezone

from core.enums import DeliveryChannel, DeliveryStatus


class NotificationDelivery(models.Model):
    """Delivery record for one channel of one notification.

    Purely informational: a FAILED record is never retried. An upserted
    notification reuses its records, so each dispatch overwrites the status
    of the previous one.

    Attributes:
        notification: Reference to the parent Notification.
        channel: Delivery channel (push, browser, email).
        status: PENDING, QUEUED, SENT or FAILED.
        error_message: Error details if delivery failed.
        queued_at: When handed to the background queue.
        sent_at: When the transport accepted the message.
        failed_at: When delivery failed.
    """

    notification = models.ForeignKey(
        "core.Notification",
        on_delete=models.CASCADE,
        related_name="deliveries",
        db_column="notification_id",
        help_text="Parent notification",
    )
    channel = models.CharField(
        max_length=20,
        choices=[(c.value, c.value) for c in DeliveryChannel],
        help_text="Delivery channel (push, browser, email)",
    )
    status = models.CharField(
        max_length=20,
        default=DeliveryStatus.PENDING.value,
        help_text="Delivery status (PENDING, QUEUED, SENT, FAILED)",
    )
    error_message = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    queued_at = models.DateTimeField(null=True, blank=True)
    sent_at = models.DateTimeField(null=True, blank=True)
    failed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        """Django model metadata."""

        db_table = "notification_deliveries"
        ordering: ClassVar[list[str]] = ["-created_at"]
        constraints: ClassVar[list] = [
            models.UniqueConstraint(
                fields=["notification", "channel"],
                name="uniq_delivery_per_channel",
            ),
        ]
        indexes: ClassVar[list] = [
            models.Index(fields=["status", "-created_at"]),
        ]

    def __str__(self) -> str:
        """Return string representation of the delivery."""
        return f"{self.channel} - {self.status}"

    def __repr__(self) -> str:
        """Return detailed representation of the delivery."""
        return (
            f"<NotificationDelivery(notification={self.notification_id}, "
            f"channel={self.channel}, "
            f"status={self.status})>"
        )

    def mark_queued(self) -> None:
        """Mark delivery as handed to the background queue."""
        self.status = DeliveryStatus.QUEUED.value
        self.queued_at = timezone.now()
        self.save(update_fields=["status", "queued_at", "updated_at"])

    def mark_sent(self) -> None:
        """Mark delivery as accepted by the transport."""
        self.status = DeliveryStatus.SENT.value
        self.sent_at = timezone.now()
        self.error_message = None
        self.save(update_fields=["status", "sent_at", "error_message", "updated_at"])

    def mark_failed(self, error_msg: str) -> None:
        """Mark delivery as failed with error message.

        Args:
            error_msg: Description of the failure.
        """
        self.status = DeliveryStatus.FAILED.value
        self.failed_at = timezone.now()
        self.error_message = error_msg
        self.save(update_fields=["status", "failed_at", "error_message", "updated_at"])
