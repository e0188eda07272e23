"""Schema for the reminder list response."""

from pydantic import Field

from core.schemas.base_schema_model import BaseSchemaModel
from core.schemas.reminder.reminder_response import ReminderResponse


class ReminderListResponse(BaseSchemaModel):
    """Reminders ordered by `remindAt`, soonest first."""

    reminders: list[ReminderResponse]
    total: int = Field(..., ge=0)
