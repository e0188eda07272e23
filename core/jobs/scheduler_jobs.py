"""Periodic jobs registered on the RQ scheduler."""

import structlog

from core.services.notification_service import notification_service
from core.services.reminder_scheduler import reminder_scheduler

logger = structlog.get_logger(__name__)


def run_reminder_tick() -> dict | None:
    """Run one reminder scheduler tick.

    Returns:
        The tick summary, or None when another tick held the lock.
    """
    result = reminder_scheduler.tick()
    if result is None:
        return None
    return result.as_dict()


def cleanup_read_notifications(days: int | None = None) -> int:
    """Delete notifications read longer ago than the retention window."""
    return notification_service.cleanup_read_notifications(days=days)
