"""Web push subscriptions and delivery through the browser push services."""

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

import structlog
from pywebpush import WebPushException, webpush

from core.enums import NotificationPriority
from core.exceptions import PushNotConfiguredError, PushSubscriptionNotFoundError
from core.models import PushSubscription
from core.models.push_subscription import hash_endpoint
from core.schemas.push import PushPayload, PushSubscriptionRequest

logger = structlog.get_logger(__name__)

# Push service responses meaning the subscription no longer exists
GONE_STATUS_CODES = frozenset({404, 410})


class PushSubscriptionService:
    """Register device push endpoints and send payloads to them."""

    @property
    def is_configured(self) -> bool:
        """Whether both VAPID keys are present."""
        return bool(
            settings.WEBPUSH_VAPID_PUBLIC_KEY and settings.WEBPUSH_VAPID_PRIVATE_KEY
        )

    def vapid_public_key(self) -> str:
        """Return the application server key browsers subscribe with.

        Raises:
            PushNotConfiguredError: If VAPID keys are not configured.
        """
        if not self.is_configured:
            raise PushNotConfiguredError()
        return settings.WEBPUSH_VAPID_PUBLIC_KEY

    def subscribe(
        self,
        owner_id,
        request: PushSubscriptionRequest,
        user_agent: str | None = None,
    ) -> PushSubscription:
        """Register or refresh a browser push subscription.

        The endpoint identifies the subscription. Re-subscribing an existing
        endpoint moves it to the caller, replaces its keys, reactivates it
        and resets its failure counter.

        Args:
            owner_id: ID of the subscribing user.
            request: Validated subscription from the browser.
            user_agent: Browser user agent, stored for the device list.

        Returns:
            The active PushSubscription.
        """
        endpoint = str(request.endpoint)
        with transaction.atomic():
            subscription, created = PushSubscription.objects.update_or_create(
                endpoint_hash=hash_endpoint(endpoint),
                defaults={
                    "user_id": owner_id,
                    "endpoint": endpoint,
                    "p256dh": request.keys.p256dh,
                    "auth": request.keys.auth,
                    "user_agent": (user_agent or "")[:500] or None,
                    "device_name": request.device_name,
                    "is_active": True,
                    "failure_count": 0,
                    "last_failure_at": None,
                },
            )

        logger.info(
            "push_subscription_registered",
            subscription_id=subscription.pk,
            owner_id=str(owner_id),
            created=created,
        )
        return subscription

    def unsubscribe(self, owner_id, endpoint: str) -> bool:
        """Remove the owner's subscription for an endpoint.

        Returns:
            True if a subscription was removed.
        """
        deleted, _ = PushSubscription.objects.filter(
            user_id=owner_id, endpoint_hash=hash_endpoint(str(endpoint))
        ).delete()
        logger.info(
            "push_subscription_removed",
            owner_id=str(owner_id),
            removed=bool(deleted),
        )
        return bool(deleted)

    def list_subscriptions(self, owner_id) -> list[PushSubscription]:
        """Return every subscription of the owner, newest first."""
        return list(PushSubscription.objects.filter(user_id=owner_id))

    def delete(self, subscription_id: int, owner_id) -> None:
        """Delete one of the owner's subscriptions.

        Raises:
            PushSubscriptionNotFoundError: Missing or owned by another user.
        """
        deleted, _ = PushSubscription.objects.filter(
            pk=subscription_id, user_id=owner_id
        ).delete()
        if not deleted:
            raise PushSubscriptionNotFoundError(subscription_id)
        logger.info(
            "push_subscription_deleted",
            subscription_id=subscription_id,
            owner_id=str(owner_id),
        )

    def send_to_owner(
        self,
        owner_id,
        payload: PushPayload,
        priority: NotificationPriority | str = NotificationPriority.NORMAL,
    ) -> int:
        """Send a payload to every active subscription of the owner.

        Args:
            owner_id: ID of the receiving user.
            payload: Payload rendered by the device's push worker.
            priority: Urgent notifications are sent with high urgency.

        Returns:
            Number of subscriptions the push services accepted.

        Raises:
            PushNotConfiguredError: If VAPID keys are not configured.
        """
        if not self.is_configured:
            raise PushNotConfiguredError()

        headers = {}
        if NotificationPriority(priority) is NotificationPriority.URGENT:
            headers["Urgency"] = "high"

        data = payload.to_json()
        delivered = 0
        subscriptions = PushSubscription.objects.filter(
            user_id=owner_id, is_active=True
        )
        for subscription in subscriptions:
            if self._send(subscription, data, headers):
                delivered += 1
        return delivered

    def _send(
        self, subscription: PushSubscription, data: str, headers: dict[str, str]
    ) -> bool:
        try:
            webpush(
                subscription_info=subscription.as_subscription_info(),
                data=data,
                vapid_private_key=settings.WEBPUSH_VAPID_PRIVATE_KEY,
                # webpush adds aud and exp to the claims it is given
                vapid_claims={"sub": settings.WEBPUSH_VAPID_SUBJECT},
                ttl=settings.WEBPUSH_TTL_SECONDS,
                headers=headers or None,
            )
        except WebPushException as e:
            status_code = getattr(e.response, "status_code", None)
            if status_code in GONE_STATUS_CODES:
                subscription.delete()
                logger.info(
                    "push_subscription_expired",
                    subscription_id=subscription.pk,
                    owner_id=str(subscription.user_id),
                    status_code=status_code,
                )
            else:
                self._record_failure(subscription, str(e), status_code)
            return False

        PushSubscription.objects.filter(pk=subscription.pk).update(
            last_used_at=timezone.now(), failure_count=0
        )
        return True

    def _record_failure(
        self, subscription: PushSubscription, error: str, status_code: int | None
    ) -> None:
        PushSubscription.objects.filter(pk=subscription.pk).update(
            failure_count=F("failure_count") + 1, last_failure_at=timezone.now()
        )
        subscription.refresh_from_db(fields=["failure_count", "is_active"])
        if subscription.failure_count >= settings.PUSH_MAX_FAILURES:
            PushSubscription.objects.filter(pk=subscription.pk).update(
                is_active=False
            )
            subscription.is_active = False

        logger.warning(
            "push_send_failed",
            subscription_id=subscription.pk,
            owner_id=str(subscription.user_id),
            status_code=status_code,
            failure_count=subscription.failure_count,
            deactivated=not subscription.is_active,
            error=error,
        )


push_subscription_service = PushSubscriptionService()
