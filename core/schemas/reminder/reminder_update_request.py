"""Schema for a partial reminder update."""

from pydantic import AwareDatetime, Field, field_validator

from core.enums import DeliveryChannel, RepeatType
from core.schemas.base_schema_model import BaseSchemaModel


class ReminderUpdateRequest(BaseSchemaModel):
    """Fields a reminder owner may change. Omitted fields stay untouched.

    Completion and snooze state are changed through their own endpoints.
    """

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    remind_at: AwareDatetime | None = None
    repeat_type: RepeatType | None = None
    notify_via: list[DeliveryChannel] | None = Field(None, min_length=1)
    client_id: int | None = Field(None, ge=1)

    @field_validator("notify_via")
    @classmethod
    def drop_duplicate_channels(cls, value: list | None) -> list | None:
        """Keep the first occurrence of each channel."""
        if value is None:
            return None
        return list(dict.fromkeys(value))

    def changes(self) -> dict:
        """Return only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)
