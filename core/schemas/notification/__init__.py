"""Notification schemas."""

from core.schemas.notification.mark_all_read_response import MarkAllReadResponse
from core.schemas.notification.notification_event_request import (
    NotificationEventRequest,
)
from core.schemas.notification.notification_list_query import NotificationListQuery
from core.schemas.notification.notification_list_response import (
    NotificationListResponse,
)
from core.schemas.notification.notification_response import NotificationResponse
from core.schemas.notification.notification_test_request import (
    NotificationTestRequest,
)
from core.schemas.notification.unread_count_response import UnreadCountResponse

__all__ = [
    "MarkAllReadResponse",
    "NotificationEventRequest",
    "NotificationListQuery",
    "NotificationListResponse",
    "NotificationResponse",
    "NotificationTestRequest",
    "UnreadCountResponse",
]
