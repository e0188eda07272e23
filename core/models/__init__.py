"""Database models for core application."""

from core.models.notification import Notification
from core.models.notification_delivery import NotificationDelivery
from core.models.notification_preference import NotificationPreference
from core.models.push_subscription import PushSubscription
from core.models.reminder import Reminder
from core.models.user import User

__all__ = [
    "Notification",
    "NotificationDelivery",
    "NotificationPreference",
    "PushSubscription",
    "Reminder",
    "User",
]
