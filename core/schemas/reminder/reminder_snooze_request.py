"""Schema for snoozing a reminder."""

from datetime import timedelta

from pydantic import AwareDatetime, Field, model_validator

from core.schemas.base_schema_model import BaseSchemaModel


class ReminderSnoozeRequest(BaseSchemaModel):
    """Snooze until an absolute instant or for a number of minutes.

    Exactly one of `until` and `minutes` must be given. Whether `until` lies
    in the future is checked by the scheduler against its own clock.
    """

    until: AwareDatetime | None = None
    minutes: int | None = Field(None, ge=1, le=60 * 24 * 30)

    @model_validator(mode="after")
    def require_exactly_one(self) -> "ReminderSnoozeRequest":
        """Reject requests naming both or neither of until and minutes."""
        if (self.until is None) == (self.minutes is None):
            raise ValueError("Provide exactly one of 'until' or 'minutes'")
        return self

    @property
    def duration(self) -> timedelta:
        """Snooze length when given in minutes."""
        return timedelta(minutes=self.minutes or 0)
