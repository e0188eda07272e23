"""Delivery channel and delivery status enumerations."""

from enum import Enum


class DeliveryChannel(str, Enum):
    """Transports a notification can be dispatched through.

    BROWSER is the in-app list served by the notification center poll,
    PUSH is OS-level web push, EMAIL is SMTP.
    """

    PUSH = "push"
    BROWSER = "browser"
    EMAIL = "email"


class DeliveryStatus(str, Enum):
    """Lifecycle of a single channel delivery attempt.

    Named with the channel record in mind: there is no retry state because
    failed deliveries are never retried automatically.
    """

    PENDING = "PENDING"
    QUEUED = "QUEUED"
    SENT = "SENT"
    FAILED = "FAILED"
