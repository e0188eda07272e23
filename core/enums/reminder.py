"""Reminder-related enumerations."""

from enum import Enum


class RepeatType(str, Enum):
    """Recurrence rule of a reminder."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ReminderStatusFilter(str, Enum):
    """Status filter accepted by the reminder list endpoint."""

    PENDING = "pending"
    COMPLETED = "completed"
    ALL = "all"
