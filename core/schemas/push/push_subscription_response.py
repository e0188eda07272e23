"""Schema for a registered push subscription."""

from datetime import datetime

from core.schemas.base_schema_model import BaseSchemaModel


class PushSubscriptionResponse(BaseSchemaModel):
    """Subscription as listed in the owner's device settings.

    Keys and the full endpoint are never echoed back.
    """

    id: int
    device_name: str | None = None
    user_agent: str | None = None
    is_active: bool
    last_used_at: datetime | None = None
    failure_count: int
    created_at: datetime
