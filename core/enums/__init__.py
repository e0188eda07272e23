"""Enumerations for the core app."""

from core.enums.delivery import DeliveryChannel, DeliveryStatus
from core.enums.health_status import HealthStatus
from core.enums.notification import NotificationPriority, NotificationType
from core.enums.reminder import ReminderStatusFilter, RepeatType

__all__ = [
    "DeliveryChannel",
    "DeliveryStatus",
    "HealthStatus",
    "NotificationPriority",
    "NotificationType",
    "ReminderStatusFilter",
    "RepeatType",
]
