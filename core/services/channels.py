"""Channel transports and best-effort dispatch of persisted notifications.

Dispatch never raises. Persistence already happened by the time a channel
is tried, so any transport failure is logged and recorded on the channel's
NotificationDelivery row and nothing is retried.
"""

from collections.abc import Callable, Iterable

import django_rq
import structlog

from core.constants import DEFAULT_QUEUE_NAME, EMAIL_JOB_PATH, PUSH_JOB_PATH
from core.enums import DeliveryChannel, DeliveryStatus
from core.models import Notification, NotificationDelivery

logger = structlog.get_logger(__name__)


def _deliver_browser(
    notification: Notification, delivery: NotificationDelivery
) -> None:
    """The in-app list is served by the poll, so persistence is delivery."""
    delivery.mark_sent()


def _enqueue(
    job_path: str, notification: Notification, delivery: NotificationDelivery
) -> None:
    queue = django_rq.get_queue(DEFAULT_QUEUE_NAME)
    queue.enqueue(job_path, str(notification.notification_id))
    delivery.mark_queued()


def _deliver_push(
    notification: Notification, delivery: NotificationDelivery
) -> None:
    _enqueue(PUSH_JOB_PATH, notification, delivery)


def _deliver_email(
    notification: Notification, delivery: NotificationDelivery
) -> None:
    _enqueue(EMAIL_JOB_PATH, notification, delivery)


CHANNEL_TRANSPORTS: dict[
    DeliveryChannel, Callable[[Notification, NotificationDelivery], None]
] = {
    DeliveryChannel.BROWSER: _deliver_browser,
    DeliveryChannel.PUSH: _deliver_push,
    DeliveryChannel.EMAIL: _deliver_email,
}


def _reset_delivery(
    notification: Notification, channel: DeliveryChannel
) -> NotificationDelivery:
    """Create or reset the delivery row for one channel."""
    delivery, _ = NotificationDelivery.objects.update_or_create(
        notification=notification,
        channel=channel.value,
        defaults={
            "status": DeliveryStatus.PENDING.value,
            "error_message": None,
            "queued_at": None,
            "sent_at": None,
            "failed_at": None,
        },
    )
    return delivery


def dispatch_channels(notification_id, channels: Iterable[DeliveryChannel]) -> dict:
    """Hand a persisted notification to each selected channel transport.

    Args:
        notification_id: Primary key of the notification to deliver.
        channels: Channels that passed preference gating.

    Returns:
        Mapping of channel value to resulting delivery status.
    """
    results: dict[str, str] = {}
    try:
        notification = Notification.objects.get(notification_id=notification_id)
    except Notification.DoesNotExist:
        # Deleted before the commit hook ran
        logger.warning(
            "dispatch_notification_missing", notification_id=str(notification_id)
        )
        return results

    for channel in channels:
        channel = DeliveryChannel(channel)
        delivery = None
        try:
            delivery = _reset_delivery(notification, channel)
            CHANNEL_TRANSPORTS[channel](notification, delivery)
            results[channel.value] = delivery.status
        except Exception as e:
            logger.error(
                "channel_dispatch_failed",
                notification_id=str(notification_id),
                channel=channel.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            results[channel.value] = DeliveryStatus.FAILED.value
            if delivery is not None:
                _record_failure(delivery, str(e))

    logger.info(
        "notification_dispatched",
        notification_id=str(notification_id),
        owner_id=str(notification.user_id),
        channels=results,
    )
    return results


def _record_failure(delivery: NotificationDelivery, error: str) -> None:
    """Mark a delivery failed without letting a second error escape."""
    try:
        delivery.mark_failed(error)
    except Exception as e:
        logger.error(
            "delivery_status_update_failed",
            delivery_id=delivery.pk,
            error=str(e),
        )
