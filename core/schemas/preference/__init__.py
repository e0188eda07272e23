"""Notification preference schemas."""

from core.schemas.preference.preference_response import PreferenceResponse
from core.schemas.preference.preference_update_request import (
    PreferenceUpdateRequest,
)

__all__ = ["PreferenceResponse", "PreferenceUpdateRequest"]
