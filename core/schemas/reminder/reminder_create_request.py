"""Schema for creating a reminder."""

from pydantic import AwareDatetime, Field, field_validator

from core.enums import DeliveryChannel, RepeatType
from core.schemas.base_schema_model import BaseSchemaModel


def default_notify_via() -> list[DeliveryChannel]:
    """Channels used when the request does not name any."""
    return [DeliveryChannel.BROWSER, DeliveryChannel.PUSH]


class ReminderCreateRequest(BaseSchemaModel):
    """Request schema for a new reminder.

    `remindAt` must carry a UTC offset so that it denotes one instant.
    """

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=5000)
    remind_at: AwareDatetime
    repeat_type: RepeatType = RepeatType.NONE
    notify_via: list[DeliveryChannel] = Field(
        default_factory=default_notify_via, min_length=1
    )
    client_id: int | None = Field(None, ge=1)

    @field_validator("notify_via")
    @classmethod
    def drop_duplicate_channels(cls, value: list) -> list:
        """Keep the first occurrence of each channel."""
        return list(dict.fromkeys(value))
