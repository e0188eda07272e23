"""Schema for a single notification as shown to its owner."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from core.enums import NotificationPriority, NotificationType
from core.schemas.base_schema_model import BaseSchemaModel


class NotificationResponse(BaseSchemaModel):
    """Notification row in the owner's in-app list."""

    id: UUID = Field(
        ...,
        validation_alias="notification_id",
        description="Unique identifier for the notification",
    )
    type: NotificationType
    tag: str
    title: str
    body: str
    priority: NotificationPriority
    action_url: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime = Field(
        ..., description="When the current content was produced"
    )
