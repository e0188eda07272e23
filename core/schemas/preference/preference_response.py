"""Schema for a user's notification preferences."""

from datetime import time

from core.schemas.base_schema_model import BaseSchemaModel


class PreferenceResponse(BaseSchemaModel):
    """Preference record as stored, with toggle maps verbatim."""

    enable_notifications: bool
    push_enabled: bool
    browser_enabled: bool
    email_enabled: bool
    categories: dict[str, bool]
    category_channels: dict[str, dict[str, bool]]
    quiet_hours_enabled: bool
    quiet_hours_start: time
    quiet_hours_end: time
    timezone: str
