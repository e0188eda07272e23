"""Reminder model."""

from typing import ClassVar

from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from core.enums import DeliveryChannel, RepeatType


def default_notify_via() -> list[str]:
    """Channels a reminder notifies through unless told otherwise."""
    return [DeliveryChannel.BROWSER.value, DeliveryChannel.PUSH.value]


class Reminder(models.Model):
    """A time-triggered reminder owned by one user.

    A completed reminder never fires again until reopened. A repeating
    reminder moves `remind_at` forward when it fires. A non-repeating one is
    left untouched and stays overdue until completed; `last_fired_at`
    records which occurrence was already announced so it fires only once.

    Attributes:
        user: Owner of the reminder.
        client_id: Optional id of the linked CRM entity.
        title: Headline shown in the notification.
        description: Optional body text.
        remind_at: When the current occurrence is due.
        repeat_type: none, daily, weekly or monthly.
        notify_via: Channel names this reminder may be delivered through.
        is_completed: Completed reminders are excluded from due detection.
        completed_at: When it was completed.
        is_snoozed: Whether snoozed_until gates the reminder.
        snoozed_until: When a snoozed reminder becomes due again.
        last_fired_at: Occurrence timestamp most recently fired.
    """

    user = models.ForeignKey(
        "core.User",
        on_delete=models.CASCADE,
        related_name="reminders",
        db_column="user_id",
    )
    client_id = models.BigIntegerField(null=True, blank=True)
    title = models.CharField(max_length=255)
    description = models.TextField(default="", blank=True)
    remind_at = models.DateTimeField()
    repeat_type = models.CharField(
        max_length=10,
        choices=[(r.value, r.value) for r in RepeatType],
        default=RepeatType.NONE.value,
    )
    notify_via = models.JSONField(default=default_notify_via)
    is_completed = models.BooleanField(default=False)
    completed_at = models.DateTimeField(null=True, blank=True)
    is_snoozed = models.BooleanField(default=False)
    snoozed_until = models.DateTimeField(null=True, blank=True)
    last_fired_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Occurrence most recently fired by the scheduler",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Django model metadata."""

        db_table = "reminders"
        ordering: ClassVar[list[str]] = ["remind_at"]
        indexes: ClassVar[list] = [
            models.Index(fields=["remind_at"]),
            models.Index(fields=["user", "is_completed"]),
            models.Index(fields=["client_id"]),
        ]

    def __str__(self) -> str:
        """Return string representation of the reminder."""
        return f"{self.title} at {self.remind_at.isoformat()}"

    def __repr__(self) -> str:
        """Return detailed representation of the reminder."""
        return (
            f"<Reminder(id={self.pk}, user={self.user_id}, "
            f"remind_at={self.remind_at}, repeat={self.repeat_type}, "
            f"completed={self.is_completed})>"
        )

    @staticmethod
    def due_filter(now) -> Q:
        """Predicate selecting reminders with an unfired due occurrence.

        Due means `remind_at <= now`, not completed, and either not snoozed
        or snoozed until a moment already passed. An occurrence is unfired
        when `last_fired_at` is older than `remind_at`; a snooze that has
        elapsed opens a new occurrence at `snoozed_until`.

        Args:
            now: Reference time of the scan.

        Returns:
            Q object usable in filter() and in conditional updates.
        """
        unfired = Q(last_fired_at__isnull=True) | Q(last_fired_at__lt=F("remind_at"))
        snooze_elapsed = Q(is_snoozed=True, snoozed_until__lte=now)
        return Q(remind_at__lte=now, is_completed=False) & (
            (Q(is_snoozed=False) & unfired)
            | (snooze_elapsed & (unfired | Q(last_fired_at__lt=F("snoozed_until"))))
        )

    def current_occurrence(self):
        """Timestamp of the occurrence a fire right now would announce."""
        snoozed_until = self.snoozed_until if self.is_snoozed else None
        if snoozed_until and snoozed_until > self.remind_at:
            return snoozed_until
        return self.remind_at

    @property
    def status(self) -> str:
        """Derived list status: completed, snoozed, overdue or upcoming."""
        now = timezone.now()
        if self.is_completed:
            return "completed"
        if self.is_snoozed and self.snoozed_until and self.snoozed_until > now:
            return "snoozed"
        if self.remind_at <= now:
            return "overdue"
        return "upcoming"
