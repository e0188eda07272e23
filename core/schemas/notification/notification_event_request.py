"""Schema for events emitted by producing modules."""

from typing import Any
from uuid import UUID

from pydantic import Field

from core.enums import DeliveryChannel, NotificationPriority, NotificationType
from core.schemas.base_schema_model import BaseSchemaModel


class NotificationEventRequest(BaseSchemaModel):
    """Event from a producer such as billing, post publishing or goal tracking.

    When `tag` is omitted the service derives one from `data.entityId`.
    """

    owner_id: UUID = Field(..., description="User the notification is for")
    type: NotificationType
    title: str = Field(..., min_length=1, max_length=255)
    body: str = Field("", max_length=5000)
    tag: str | None = Field(None, min_length=1, max_length=255)
    priority: NotificationPriority = NotificationPriority.NORMAL
    action_url: str | None = Field(None, max_length=500)
    data: dict[str, Any] | None = None
    channels: list[DeliveryChannel] | None = Field(
        None, description="Restrict delivery to these channels"
    )
