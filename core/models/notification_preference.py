"""Per-user notification preferences."""

from datetime import time

from django.db import models


def default_true_map() -> dict:
    """Empty toggle map; a missing key means enabled."""
    return {}


class NotificationPreference(models.Model):
    """Preference record attached 1:1 to a user.

    Plain data only. Gating decisions are made by the notification service.

    Attributes:
        user: Owner of the preferences.
        enable_notifications: Master switch for every category and channel.
        push_enabled: OS-level web push channel toggle.
        browser_enabled: In-app list channel toggle.
        email_enabled: E-mail channel toggle.
        categories: Map of notification type to bool. Missing keys are enabled.
        category_channels: Map of notification type to {channel: bool}.
            Missing keys are enabled.
        quiet_hours_enabled: Suppress push during the quiet window.
        quiet_hours_start: Local start of the quiet window.
        quiet_hours_end: Local end of the quiet window, may wrap past midnight.
        timezone: IANA zone the quiet window is expressed in.
    """

    user = models.OneToOneField(
        "core.User",
        on_delete=models.CASCADE,
        related_name="notification_preference",
        db_column="user_id",
    )
    enable_notifications = models.BooleanField(
        default=True,
        help_text="Master switch for all notifications",
    )
    push_enabled = models.BooleanField(default=True)
    browser_enabled = models.BooleanField(default=True)
    email_enabled = models.BooleanField(default=False)
    categories = models.JSONField(
        default=default_true_map,
        blank=True,
        help_text="Notification type to enabled flag",
    )
    category_channels = models.JSONField(
        default=default_true_map,
        blank=True,
        help_text="Notification type to per-channel enabled flags",
    )
    quiet_hours_enabled = models.BooleanField(default=False)
    quiet_hours_start = models.TimeField(default=time(22, 0))
    quiet_hours_end = models.TimeField(default=time(7, 0))
    timezone = models.CharField(max_length=50, default="UTC")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Django model metadata."""

        db_table = "notification_preferences"

    def __str__(self) -> str:
        """Return string representation of the preference record."""
        return f"Notification preferences for user {self.user_id}"
