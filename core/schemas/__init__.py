"""Schemas for the core app."""

from core.schemas.health import (
    DependencyHealth,
    LivenessResponse,
    ReadinessResponse,
)
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
    PushPayload,
    PushPayloadData,
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
from core.schemas.scheduler import SchedulerRunRequest, SchedulerRunResponse

__all__ = [
    "DependencyHealth",
    "LivenessResponse",
    "MarkAllReadResponse",
    "NotificationEventRequest",
    "NotificationListQuery",
    "NotificationListResponse",
    "NotificationResponse",
    "NotificationTestRequest",
    "PreferenceResponse",
    "PreferenceUpdateRequest",
    "PushPayload",
    "PushPayloadData",
    "PushSubscriptionRequest",
    "PushSubscriptionResponse",
    "PushUnsubscribeRequest",
    "ReadinessResponse",
    "ReminderCreateRequest",
    "ReminderListResponse",
    "ReminderResponse",
    "ReminderSnoozeRequest",
    "ReminderUpdateRequest",
    "SchedulerRunRequest",
    "SchedulerRunResponse",
    "UnreadCountResponse",
    "VapidKeyResponse",
]
