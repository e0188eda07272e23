"""Schema for a partial preference update."""

from datetime import time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ConfigDict, field_validator

from core.enums import DeliveryChannel, NotificationType
from core.schemas.base_schema_model import BaseSchemaModel

_TYPES = {t.value for t in NotificationType}
_CHANNELS = {c.value for c in DeliveryChannel}


class PreferenceUpdateRequest(BaseSchemaModel):
    """Preference fields to change. Omitted fields stay untouched.

    Unknown keys are rejected instead of silently dropped, so a typo in a
    toggle name surfaces as a 400. The toggle maps are merged key-wise into
    the stored maps.
    """

    model_config = ConfigDict(extra="forbid")

    enable_notifications: bool | None = None
    push_enabled: bool | None = None
    browser_enabled: bool | None = None
    email_enabled: bool | None = None
    categories: dict[str, bool] | None = None
    category_channels: dict[str, dict[str, bool]] | None = None
    quiet_hours_enabled: bool | None = None
    quiet_hours_start: time | None = None
    quiet_hours_end: time | None = None
    timezone: str | None = None

    @field_validator("categories")
    @classmethod
    def known_categories(cls, value: dict | None) -> dict | None:
        """Only notification types are valid category keys."""
        if value is not None:
            unknown = sorted(set(value) - _TYPES)
            if unknown:
                raise ValueError(f"Unknown categories: {', '.join(unknown)}")
        return value

    @field_validator("category_channels")
    @classmethod
    def known_category_channels(cls, value: dict | None) -> dict | None:
        """Keys must be notification types, inner keys delivery channels."""
        if value is None:
            return value
        unknown = sorted(set(value) - _TYPES)
        if unknown:
            raise ValueError(f"Unknown categories: {', '.join(unknown)}")
        for category, channels in value.items():
            bad = sorted(set(channels) - _CHANNELS)
            if bad:
                raise ValueError(f"Unknown channels for {category}: {', '.join(bad)}")
        return value

    @field_validator("timezone")
    @classmethod
    def valid_timezone(cls, value: str | None) -> str | None:
        """Timezone must be a known IANA zone."""
        if value is not None:
            try:
                ZoneInfo(value)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown timezone: {value}") from e
        return value

    def changes(self) -> dict:
        """Return only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)
