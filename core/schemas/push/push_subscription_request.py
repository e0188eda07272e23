"""Schemas for registering and removing push subscriptions."""

from pydantic import Field, HttpUrl

from core.schemas.base_schema_model import BaseSchemaModel


class PushSubscriptionKeys(BaseSchemaModel):
    """Encryption keys generated by the browser's push manager."""

    p256dh: str = Field(..., min_length=1, max_length=255)
    auth: str = Field(..., min_length=1, max_length=255)


class PushSubscriptionRequest(BaseSchemaModel):
    """Browser PushSubscription serialized by `subscription.toJSON()`."""

    endpoint: HttpUrl
    keys: PushSubscriptionKeys
    device_name: str | None = Field(None, max_length=100)


class PushUnsubscribeRequest(BaseSchemaModel):
    """Endpoint whose subscription should be removed."""

    endpoint: HttpUrl
