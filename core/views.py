"""API views for the workspace notification service.

Every owner-facing view acts on behalf of `request.user.owner_id`; no view
accepts an owner id from the client except the producer event endpoint.
"""

import structlog
from pydantic import ValidationError
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core.auth.oauth2 import OAuth2Authentication
from core.auth.permissions import HasAdminScope, HasProducerScope, HasUserScope
from core.schemas.base_schema_model import BaseSchemaModel
from core.schemas.notification import (
    MarkAllReadResponse,
    NotificationEventRequest,
    NotificationListQuery,
    NotificationListResponse,
    NotificationResponse,
    NotificationTestRequest,
    UnreadCountResponse,
)
from core.schemas.preference import PreferenceResponse, PreferenceUpdateRequest
from core.schemas.push import (
    PushSubscriptionRequest,
    PushSubscriptionResponse,
    PushUnsubscribeRequest,
    VapidKeyResponse,
)
from core.schemas.reminder import (
    ReminderCreateRequest,
    ReminderListResponse,
    ReminderResponse,
    ReminderSnoozeRequest,
    ReminderUpdateRequest,
)
from core.schemas.scheduler import (
    SchedulerJob,
    SchedulerRunRequest,
    SchedulerRunResponse,
)
from core.services.health_service import health_service
from core.services.notification_service import notification_service
from core.services.preference_store import preference_store
from core.services.push_subscription_service import push_subscription_service
from core.services.reminder_scheduler import reminder_scheduler

logger = structlog.get_logger(__name__)


def _json(schema: BaseSchemaModel, status_code: int = status.HTTP_200_OK) -> Response:
    """Serialize a response schema with camelCase keys."""
    return Response(schema.model_dump(by_alias=True, mode="json"), status=status_code)


def _bad_request(e: ValidationError, event: str) -> Response:
    """400 response for a request that failed schema validation."""
    errors = e.errors(include_url=False, include_context=False)
    logger.warning(event, validation_errors=errors)
    return Response(
        {
            "error": "bad_request",
            "message": "Invalid request parameters",
            "errors": errors,
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


class WorkspaceAPIView(APIView):
    """Base view for endpoints that act on the caller's own data."""

    authentication_classes = (OAuth2Authentication,)
    permission_classes = (HasUserScope,)

    @staticmethod
    def owner_id(request) -> str:
        """ID of the authenticated user the request acts for."""
        return request.user.owner_id


# Health


class LivenessCheckView(APIView):
    """Liveness probe endpoint. Exempt from authentication."""

    authentication_classes = ()
    permission_classes = (AllowAny,)

    def get(self, _request):
        """Return 200 while the process is serving requests."""
        return _json(health_service.get_liveness_status())


class ReadinessCheckView(APIView):
    """Readiness probe endpoint. Exempt from authentication.

    Answers 200 in degraded mode as well, so an unavailable dependency does
    not take the whole API out of rotation.
    """

    authentication_classes = ()
    permission_classes = (AllowAny,)

    def get(self, _request):
        """Return dependency health."""
        return _json(health_service.get_readiness_status())


# Notifications


class NotificationListView(WorkspaceAPIView):
    """Paged list of the caller's notifications."""

    def get(self, request):
        """Handle GET request for the notification list.

        Query parameters: limit, offset, unreadOnly, type.

        Returns:
            200 with NotificationListResponse
            400 Bad Request if a query parameter is invalid
        """
        try:
            query = NotificationListQuery.model_validate(request.query_params.dict())
        except ValidationError as e:
            return _bad_request(e, "invalid_notification_list_query")

        page, unread_count, total = notification_service.list_notifications(
            self.owner_id(request),
            limit=query.limit,
            offset=query.offset,
            unread_only=query.unread_only,
            type=query.type,
        )
        return _json(
            NotificationListResponse(
                notifications=[NotificationResponse.model_validate(n) for n in page],
                unread_count=unread_count,
                total=total,
            )
        )


class UnreadCountView(WorkspaceAPIView):
    """Unread badge count of the caller."""

    def get(self, request):
        """Return the number of unread notifications."""
        count = notification_service.unread_count(self.owner_id(request))
        return _json(UnreadCountResponse(count=count))


class NotificationReadView(WorkspaceAPIView):
    """Mark one notification as read."""

    def put(self, request, notification_id):
        """Handle PUT request to mark a notification read.

        Returns:
            200 with the updated NotificationResponse
            404 Not Found if the notification is missing or not the caller's
        """
        notification = notification_service.mark_read(
            notification_id, self.owner_id(request)
        )
        return _json(NotificationResponse.model_validate(notification))


class NotificationReadAllView(WorkspaceAPIView):
    """Mark every notification of the caller as read."""

    def put(self, request):
        """Return the number of notifications changed."""
        updated = notification_service.mark_all_read(self.owner_id(request))
        return _json(MarkAllReadResponse(updated=updated))


class NotificationDetailView(WorkspaceAPIView):
    """Delete a single notification."""

    def delete(self, request, notification_id):
        """Handle DELETE request for a notification.

        Returns:
            204 No Content on success
            404 Not Found if the notification is missing or not the caller's
        """
        notification_service.delete(notification_id, self.owner_id(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


class NotificationPreferenceView(WorkspaceAPIView):
    """Read and change the caller's notification preferences."""

    def get(self, request):
        """Return the preferences, creating the defaults on first access."""
        preference = preference_store.get(self.owner_id(request))
        return _json(PreferenceResponse.model_validate(preference))

    def put(self, request):
        """Handle PUT request with a partial preference update.

        Returns:
            200 with the full updated PreferenceResponse
            400 Bad Request for unknown keys or invalid values
        """
        try:
            update = PreferenceUpdateRequest.model_validate(request.data)
        except ValidationError as e:
            return _bad_request(e, "invalid_preference_update")

        preference = preference_store.set(self.owner_id(request), update)
        return _json(PreferenceResponse.model_validate(preference))


class NotificationEventView(WorkspaceAPIView):
    """Event ingestion endpoint for other workspace modules.

    Requires notification:producer or notification:admin scope.
    """

    permission_classes = (HasProducerScope,)

    def post(self, request):
        """Handle POST request carrying a producer event.

        Returns:
            201 Created with the persisted NotificationResponse
            202 Accepted with an empty body when preferences suppressed it
            400 Bad Request if validation fails
        """
        try:
            event = NotificationEventRequest.model_validate(request.data)
        except ValidationError as e:
            return _bad_request(e, "invalid_notification_event")

        notification = notification_service.notify(
            event.owner_id,
            event.type,
            event.tag,
            event.title,
            event.body,
            priority=event.priority,
            action_url=event.action_url,
            data=event.data,
            channels=event.channels,
        )
        if notification is None:
            return Response(
                {"suppressed": True}, status=status.HTTP_202_ACCEPTED
            )
        return _json(
            NotificationResponse.model_validate(notification),
            status.HTTP_201_CREATED,
        )


class NotificationTestView(WorkspaceAPIView):
    """Send a test notification to the caller through every enabled channel."""

    def post(self, request):
        """Handle POST request for a test notification."""
        try:
            test_request = NotificationTestRequest.model_validate(request.data or {})
        except ValidationError as e:
            return _bad_request(e, "invalid_test_notification")

        notification = notification_service.send_test_notification(
            self.owner_id(request), test_request.title, test_request.body
        )
        if notification is None:
            return Response(
                {"suppressed": True}, status=status.HTTP_202_ACCEPTED
            )
        return _json(
            NotificationResponse.model_validate(notification),
            status.HTTP_201_CREATED,
        )


# Push subscriptions


class VapidKeyView(WorkspaceAPIView):
    """Application server key for the browser's push manager."""

    def get(self, _request):
        """Return the VAPID public key, or 503 when push is not configured."""
        public_key = push_subscription_service.vapid_public_key()
        return _json(VapidKeyResponse(public_key=public_key))


class PushSubscribeView(WorkspaceAPIView):
    """Register the calling browser for web push."""

    def post(self, request):
        """Handle POST request with a serialized PushSubscription.

        Returns:
            201 Created with PushSubscriptionResponse
            400 Bad Request if validation fails
        """
        try:
            subscription_request = PushSubscriptionRequest.model_validate(
                request.data
            )
        except ValidationError as e:
            return _bad_request(e, "invalid_push_subscription")

        subscription = push_subscription_service.subscribe(
            self.owner_id(request),
            subscription_request,
            user_agent=request.headers.get("User-Agent"),
        )
        return _json(
            PushSubscriptionResponse.model_validate(subscription),
            status.HTTP_201_CREATED,
        )


class PushUnsubscribeView(WorkspaceAPIView):
    """Remove the calling browser's push subscription."""

    def post(self, request):
        """Handle POST request naming the endpoint to remove."""
        try:
            unsubscribe_request = PushUnsubscribeRequest.model_validate(request.data)
        except ValidationError as e:
            return _bad_request(e, "invalid_push_unsubscribe")

        removed = push_subscription_service.unsubscribe(
            self.owner_id(request), str(unsubscribe_request.endpoint)
        )
        return Response({"removed": removed}, status=status.HTTP_200_OK)


class PushSubscriptionListView(WorkspaceAPIView):
    """Devices registered for push by the caller."""

    def get(self, request):
        """Return the caller's subscriptions."""
        subscriptions = push_subscription_service.list_subscriptions(
            self.owner_id(request)
        )
        return Response(
            [
                PushSubscriptionResponse.model_validate(s).model_dump(
                    by_alias=True, mode="json"
                )
                for s in subscriptions
            ],
            status=status.HTTP_200_OK,
        )


class PushSubscriptionDetailView(WorkspaceAPIView):
    """Remove one registered device."""

    def delete(self, request, subscription_id):
        """Return 204, or 404 if the subscription is not the caller's."""
        push_subscription_service.delete(subscription_id, self.owner_id(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


# Reminders


class ReminderListView(WorkspaceAPIView):
    """List and create the caller's reminders."""

    def get(self, request):
        """Handle GET request with optional `status` of pending, completed or all.

        Returns:
            200 with ReminderListResponse ordered by remind_at
            400 Bad Request for an unknown status filter
        """
        status_filter = request.query_params.get("status") or "all"
        try:
            reminders = reminder_scheduler.list_reminders(
                self.owner_id(request), status_filter
            )
        except ValueError:
            return Response(
                {
                    "error": "bad_request",
                    "message": "status must be pending, completed or all",
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        return _json(
            ReminderListResponse(
                reminders=[ReminderResponse.model_validate(r) for r in reminders],
                total=len(reminders),
            )
        )

    def post(self, request):
        """Handle POST request creating a reminder.

        Returns:
            201 Created with ReminderResponse
            400 Bad Request if validation fails
        """
        try:
            create_request = ReminderCreateRequest.model_validate(request.data)
        except ValidationError as e:
            return _bad_request(e, "invalid_reminder_create")

        reminder = reminder_scheduler.create(self.owner_id(request), create_request)
        return _json(
            ReminderResponse.model_validate(reminder), status.HTTP_201_CREATED
        )


class ReminderDetailView(WorkspaceAPIView):
    """Read, change or delete one reminder."""

    def get(self, request, reminder_id):
        """Return the reminder, or 404 if it is not the caller's."""
        reminder = reminder_scheduler.get(reminder_id, self.owner_id(request))
        return _json(ReminderResponse.model_validate(reminder))

    def put(self, request, reminder_id):
        """Handle PUT request with a partial reminder update."""
        try:
            update_request = ReminderUpdateRequest.model_validate(request.data)
        except ValidationError as e:
            return _bad_request(e, "invalid_reminder_update")

        reminder = reminder_scheduler.update(
            reminder_id, self.owner_id(request), update_request
        )
        return _json(ReminderResponse.model_validate(reminder))

    def delete(self, request, reminder_id):
        """Delete the reminder. Notifications it produced are kept."""
        reminder_scheduler.delete(reminder_id, self.owner_id(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


class ReminderCompleteView(WorkspaceAPIView):
    """Mark a reminder completed."""

    def post(self, request, reminder_id):
        """Complete the reminder. Completing twice is a no-op."""
        reminder = reminder_scheduler.complete(reminder_id, self.owner_id(request))
        return _json(ReminderResponse.model_validate(reminder))


class ReminderReopenView(WorkspaceAPIView):
    """Undo completion of a reminder."""

    def post(self, request, reminder_id):
        """Reopen the reminder so it can fire again."""
        reminder = reminder_scheduler.reopen(reminder_id, self.owner_id(request))
        return _json(ReminderResponse.model_validate(reminder))


class ReminderSnoozeView(WorkspaceAPIView):
    """Snooze a reminder."""

    def post(self, request, reminder_id):
        """Handle POST request with `until` or `minutes`.

        Returns:
            200 with the snoozed ReminderResponse
            400 Bad Request if `until` is not in the future
            409 Conflict if the reminder is completed
        """
        try:
            snooze_request = ReminderSnoozeRequest.model_validate(request.data)
        except ValidationError as e:
            return _bad_request(e, "invalid_reminder_snooze")

        owner_id = self.owner_id(request)
        if snooze_request.until is not None:
            reminder = reminder_scheduler.snooze(
                reminder_id, owner_id, snooze_request.until
            )
        else:
            reminder = reminder_scheduler.snooze_for(
                reminder_id, owner_id, snooze_request.duration
            )
        return _json(ReminderResponse.model_validate(reminder))


# Operations


class SchedulerRunView(WorkspaceAPIView):
    """Manually trigger a periodic job. Requires notification:admin scope."""

    permission_classes = (HasAdminScope,)

    def post(self, request):
        """Handle POST request naming the job to run.

        Returns:
            200 with SchedulerRunResponse
            409 Conflict if a reminder tick is already running
        """
        try:
            run_request = SchedulerRunRequest.model_validate(request.data)
        except ValidationError as e:
            return _bad_request(e, "invalid_scheduler_run")

        job = SchedulerJob(run_request.job)
        logger.info("scheduler_run_requested", job=job.value)
        if job is SchedulerJob.REMINDERS:
            tick = reminder_scheduler.tick()
            if tick is None:
                return Response(
                    {
                        "error": "conflict",
                        "message": "A reminder tick is already running",
                    },
                    status=status.HTTP_409_CONFLICT,
                )
            result = tick.as_dict()
        else:
            result = {"deleted": notification_service.cleanup_read_notifications()}
        return _json(SchedulerRunResponse(job=job, result=result))
