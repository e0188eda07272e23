"""Web push schemas."""

from core.schemas.push.push_payload import PushPayload, PushPayloadData
from core.schemas.push.push_subscription_request import (
    PushSubscriptionKeys,
    PushSubscriptionRequest,
    PushUnsubscribeRequest,
)
from core.schemas.push.push_subscription_response import PushSubscriptionResponse
from core.schemas.push.vapid_key_response import VapidKeyResponse

__all__ = [
    "PushPayload",
    "PushPayloadData",
    "PushSubscriptionKeys",
    "PushSubscriptionRequest",
    "PushSubscriptionResponse",
    "PushUnsubscribeRequest",
    "VapidKeyResponse",
]
