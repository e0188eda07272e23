"""Notification-related enumerations.

Notification types double as preference categories: every producer emits
exactly one type, and the per-user category toggles are keyed on it.
"""

from enum import Enum


class NotificationType(str, Enum):
    """Kinds of events a producer can emit."""

    REMINDER = "reminder"
    BILL = "bill"
    POST_PUBLISHED = "post-published"
    POST_FAILED = "post-failed"
    BUDGET_ALERT = "budget-alert"
    GOAL_PROGRESS = "goal-progress"
    SYSTEM = "system"
    CUSTOM = "custom"


class NotificationPriority(str, Enum):
    """Display priority of a notification.

    URGENT notifications require interaction on the device and are sent
    with high push urgency.
    """

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"
