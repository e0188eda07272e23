"""Schema for the notification list response."""

from pydantic import Field

from core.schemas.base_schema_model import BaseSchemaModel
from core.schemas.notification.notification_response import NotificationResponse


class NotificationListResponse(BaseSchemaModel):
    """Most-recent-first page of notifications plus counters."""

    notifications: list[NotificationResponse]
    unread_count: int = Field(..., ge=0, description="Unread notifications overall")
    total: int = Field(..., ge=0, description="Rows matching the list filters")
