"""Background job delivering a notification by e-mail."""

import smtplib
from uuid import UUID

import structlog

from core.enums import DeliveryChannel, DeliveryStatus
from core.models import Notification, NotificationDelivery, User
from core.services.email_service import EmailService

logger = structlog.get_logger(__name__)


def send_email_notification(notification_id: str) -> None:
    """Send a notification to its owner's e-mail address.

    Executed by RQ workers. The recipient is resolved from the users table
    at send time. The outcome is recorded on the email NotificationDelivery
    row; failures are never retried.

    Args:
        notification_id: UUID of the notification to send.
    """
    notification_uuid = UUID(notification_id)
    notification = Notification.objects.filter(
        notification_id=notification_uuid
    ).first()
    if notification is None:
        logger.warning("email_notification_missing", notification_id=notification_id)
        return

    delivery, _ = NotificationDelivery.objects.get_or_create(
        notification=notification,
        channel=DeliveryChannel.EMAIL.value,
    )
    if delivery.status == DeliveryStatus.SENT.value:
        logger.info("email_already_sent", notification_id=notification_id)
        return

    recipient = (
        User.objects.filter(user_id=notification.user_id)
        .values_list("email", flat=True)
        .first()
    )
    if not recipient:
        logger.error(
            "recipient_email_missing",
            notification_id=notification_id,
            owner_id=str(notification.user_id),
        )
        delivery.mark_failed("No recipient email address")
        return

    try:
        EmailService().send_notification(notification, recipient)
    except (smtplib.SMTPException, OSError, ValueError) as e:
        logger.error(
            "email_delivery_failed",
            notification_id=notification_id,
            error=str(e),
            error_type=type(e).__name__,
        )
        delivery.mark_failed(str(e))
        return

    delivery.mark_sent()
    logger.info(
        "email_delivered",
        notification_id=notification_id,
        owner_id=str(notification.user_id),
    )
