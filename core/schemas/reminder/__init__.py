"""Reminder schemas."""

from core.schemas.reminder.reminder_create_request import ReminderCreateRequest
from core.schemas.reminder.reminder_list_response import ReminderListResponse
from core.schemas.reminder.reminder_response import ReminderResponse
from core.schemas.reminder.reminder_snooze_request import ReminderSnoozeRequest
from core.schemas.reminder.reminder_update_request import ReminderUpdateRequest

__all__ = [
    "ReminderCreateRequest",
    "ReminderListResponse",
    "ReminderResponse",
    "ReminderSnoozeRequest",
    "ReminderUpdateRequest",
]
