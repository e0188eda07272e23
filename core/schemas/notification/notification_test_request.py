"""Schema for the self-addressed test notification."""

from pydantic import Field

from core.schemas.base_schema_model import BaseSchemaModel


class NotificationTestRequest(BaseSchemaModel):
    """Optional overrides for the test notification."""

    title: str = Field("Test Notification", min_length=1, max_length=255)
    body: str = Field(
        "This is a test notification from Workspace", max_length=5000
    )
