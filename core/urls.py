"""URL routing configuration for core application."""

from django.urls import path

from .views import (
    LivenessCheckView,
    NotificationDetailView,
    NotificationEventView,
    NotificationListView,
    NotificationPreferenceView,
    NotificationReadAllView,
    NotificationReadView,
    NotificationTestView,
    PushSubscribeView,
    PushSubscriptionDetailView,
    PushSubscriptionListView,
    PushUnsubscribeView,
    ReadinessCheckView,
    ReminderCompleteView,
    ReminderDetailView,
    ReminderListView,
    ReminderReopenView,
    ReminderSnoozeView,
    SchedulerRunView,
    UnreadCountView,
    VapidKeyView,
)

urlpatterns = [
    # Health check endpoints
    path("health/live", LivenessCheckView.as_view(), name="health-live"),
    path("health/ready", ReadinessCheckView.as_view(), name="health-ready"),
    # Notification endpoints (fixed routes before <notification_id>)
    path("notifications", NotificationListView.as_view(), name="notification-list"),
    path(
        "notifications/unread-count",
        UnreadCountView.as_view(),
        name="notification-unread-count",
    ),
    path(
        "notifications/read-all",
        NotificationReadAllView.as_view(),
        name="notification-read-all",
    ),
    path(
        "notifications/preferences",
        NotificationPreferenceView.as_view(),
        name="notification-preferences",
    ),
    path(
        "notifications/events",
        NotificationEventView.as_view(),
        name="notification-events",
    ),
    path(
        "notifications/test",
        NotificationTestView.as_view(),
        name="notification-test",
    ),
    # Push subscription endpoints
    path("notifications/vapid-key", VapidKeyView.as_view(), name="vapid-key"),
    path(
        "notifications/subscribe",
        PushSubscribeView.as_view(),
        name="push-subscribe",
    ),
    path(
        "notifications/unsubscribe",
        PushUnsubscribeView.as_view(),
        name="push-unsubscribe",
    ),
    path(
        "notifications/subscriptions",
        PushSubscriptionListView.as_view(),
        name="push-subscription-list",
    ),
    path(
        "notifications/subscriptions/<int:subscription_id>",
        PushSubscriptionDetailView.as_view(),
        name="push-subscription-detail",
    ),
    path(
        "notifications/<uuid:notification_id>/read",
        NotificationReadView.as_view(),
        name="notification-read",
    ),
    path(
        "notifications/<uuid:notification_id>",
        NotificationDetailView.as_view(),
        name="notification-detail",
    ),
    # Reminder endpoints
    path("reminders", ReminderListView.as_view(), name="reminder-list"),
    path(
        "reminders/<int:reminder_id>",
        ReminderDetailView.as_view(),
        name="reminder-detail",
    ),
    path(
        "reminders/<int:reminder_id>/complete",
        ReminderCompleteView.as_view(),
        name="reminder-complete",
    ),
    path(
        "reminders/<int:reminder_id>/snooze",
        ReminderSnoozeView.as_view(),
        name="reminder-snooze",
    ),
    path(
        "reminders/<int:reminder_id>/reopen",
        ReminderReopenView.as_view(),
        name="reminder-reopen",
    ),
    # Operations
    path("scheduler/run", SchedulerRunView.as_view(), name="scheduler-run"),
]
