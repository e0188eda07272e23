"""Schema of the JSON payload sent through the web push transport."""

from datetime import datetime

from pydantic import Field

from core.enums import NotificationPriority
from core.schemas.base_schema_model import BaseSchemaModel


class PushPayloadData(BaseSchemaModel):
    """Context the device needs to act on a click."""

    action_url: str | None = None
    priority: NotificationPriority | None = None
    notification_id: str
    type: str | None = None
    created_at: datetime | None = Field(
        None, description="Server createdAt, the version the client reconciles on"
    )


class PushPayload(BaseSchemaModel):
    """Payload encrypted and delivered to the device's push endpoint."""

    title: str
    body: str
    icon: str | None = None
    badge: str | None = None
    tag: str | None = Field(None, description="Notification tag for OS collapsing")
    data: PushPayloadData

    def to_json(self) -> str:
        """Serialize with camelCase keys, omitting empty fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True)
