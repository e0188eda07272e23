"""Schema for a reminder as shown to its owner."""

from datetime import datetime

from pydantic import Field

from core.schemas.base_schema_model import BaseSchemaModel


class ReminderResponse(BaseSchemaModel):
    """Reminder detail including its derived list status."""

    id: int
    client_id: int | None = None
    title: str
    description: str
    remind_at: datetime
    repeat_type: str
    notify_via: list[str]
    is_completed: bool
    completed_at: datetime | None = None
    is_snoozed: bool
    snoozed_until: datetime | None = None
    status: str = Field(
        ..., description="completed, snoozed, overdue or upcoming"
    )
    created_at: datetime
    updated_at: datetime
