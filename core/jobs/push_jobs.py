"""Background job delivering a notification through web push."""

from uuid import UUID

import structlog

from core.constants import (
    DEFAULT_ACTION_URL,
    DEFAULT_NOTIFICATION_BADGE,
    DEFAULT_NOTIFICATION_ICON,
)
from core.enums import DeliveryChannel, DeliveryStatus
from core.models import Notification, NotificationDelivery
from core.schemas.push import PushPayload, PushPayloadData
from core.services.push_subscription_service import push_subscription_service

logger = structlog.get_logger(__name__)


def build_push_payload(notification: Notification) -> PushPayload:
    """Render a notification as the payload the device's push worker reads.

    The notification id doubles as the OS tag, so a re-notified row
    replaces its previous OS notification instead of stacking.
    """
    return PushPayload(
        title=notification.title,
        body=notification.body,
        icon=DEFAULT_NOTIFICATION_ICON,
        badge=DEFAULT_NOTIFICATION_BADGE,
        tag=str(notification.notification_id),
        data=PushPayloadData(
            action_url=notification.action_url or DEFAULT_ACTION_URL,
            priority=notification.priority,
            notification_id=str(notification.notification_id),
            type=notification.type,
            created_at=notification.created_at,
        ),
    )


def send_push_notification(notification_id: str) -> None:
    """Send a notification to all of its owner's active push subscriptions.

    Executed by RQ workers. The outcome is recorded on the push
    NotificationDelivery row; failures are never retried.

    Args:
        notification_id: UUID of the notification to send.
    """
    notification_uuid = UUID(notification_id)
    notification = Notification.objects.filter(
        notification_id=notification_uuid
    ).first()
    if notification is None:
        # Deleted by its owner while queued
        logger.warning("push_notification_missing", notification_id=notification_id)
        return

    delivery, _ = NotificationDelivery.objects.get_or_create(
        notification=notification,
        channel=DeliveryChannel.PUSH.value,
    )
    if delivery.status == DeliveryStatus.SENT.value:
        logger.info("push_already_sent", notification_id=notification_id)
        return

    try:
        delivered = push_subscription_service.send_to_owner(
            notification.user_id,
            build_push_payload(notification),
            priority=notification.priority,
        )
    except Exception as e:
        logger.error(
            "push_delivery_failed",
            notification_id=notification_id,
            error=str(e),
            error_type=type(e).__name__,
        )
        delivery.mark_failed(str(e))
        return

    if not delivered:
        delivery.mark_failed("No active push subscription accepted the message")
        logger.info(
            "push_delivery_skipped",
            notification_id=notification_id,
            owner_id=str(notification.user_id),
        )
        return

    delivery.mark_sent()
    logger.info(
        "push_delivered",
        notification_id=notification_id,
        owner_id=str(notification.user_id),
        subscriptions=delivered,
    )
