"""Display tables for notifications and reminders.

Behaviour per notification type and priority is plain data looked up by
value, never subclassing.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta


@dataclass(frozen=True)
class TypePresentation:
    """Icon and accent colour of a notification type."""

    icon: str
    color: str


@dataclass(frozen=True)
class PriorityStyle:
    """Border accent of a notification row by priority."""

    border: str | None = None
    glow: bool = False


@dataclass(frozen=True)
class SnoozeChoice:
    """Entry of the reminder snooze menu."""

    label: str
    duration: timedelta

    @property
    def minutes(self) -> int:
        return int(self.duration.total_seconds() // 60)


DEFAULT_PRESENTATION = TypePresentation(icon="bell", color="#8b5cf6")

TYPE_PRESENTATION: dict[str, TypePresentation] = {
    "reminder": TypePresentation(icon="calendar", color="#f59e0b"),
    "bill": TypePresentation(icon="currency-dollar", color="#10b981"),
    "post-published": TypePresentation(icon="share", color="#ec4899"),
    "post-failed": TypePresentation(icon="exclamation-circle", color="#ef4444"),
    "budget-alert": TypePresentation(icon="exclamation-circle", color="#ef4444"),
    "goal-progress": TypePresentation(icon="sparkles", color="#06b6d4"),
    "system": TypePresentation(icon="cog", color="#6366f1"),
    "custom": DEFAULT_PRESENTATION,
}

PRIORITY_STYLES: dict[str, PriorityStyle] = {
    "low": PriorityStyle(),
    "normal": PriorityStyle(),
    "high": PriorityStyle(border="#f59e0b"),
    "urgent": PriorityStyle(border="#ef4444", glow=True),
}

SNOOZE_MENU: tuple[SnoozeChoice, ...] = (
    SnoozeChoice("1 hour", timedelta(hours=1)),
    SnoozeChoice("3 hours", timedelta(hours=3)),
    SnoozeChoice("1 day", timedelta(days=1)),
)

MAX_BADGE_COUNT = 99


def presentation_for(notification_type: str | None) -> TypePresentation:
    """Icon and colour for a type; unknown types get the bell."""
    return TYPE_PRESENTATION.get(notification_type or "", DEFAULT_PRESENTATION)


def priority_style(priority: str | None) -> PriorityStyle:
    """Row style for a priority; unknown priorities render as normal."""
    return PRIORITY_STYLES.get(priority or "", PRIORITY_STYLES["normal"])


def badge_label(unread_count: int) -> str | None:
    """Text of the unread badge, None when there is nothing unread."""
    if unread_count <= 0:
        return None
    if unread_count > MAX_BADGE_COUNT:
        return f"{MAX_BADGE_COUNT}+"
    return str(unread_count)


def format_time_ago(created_at: datetime, now: datetime | None = None) -> str:
    """Relative age of a notification, e.g. '5 minutes ago'."""
    seconds = int(((now or datetime.now(UTC)) - created_at).total_seconds())
    minutes, hours, days = seconds // 60, seconds // 3600, seconds // 86400
    if days > 0:
        return f"{days} day{'s' if days != 1 else ''} ago"
    if hours > 0:
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    if minutes > 0:
        return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
    return "Just now"
