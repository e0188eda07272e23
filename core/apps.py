"""Django application configuration for core."""

import sys

from django.apps import AppConfig
from django.conf import settings

import structlog

# Commands that must not start the in-process reminder loop
_NO_SCHEDULER_COMMANDS = frozenset(
    {
        "migrate",
        "makemigrations",
        "shell",
        "test",
        "collectstatic",
        "run_reminder_scheduler",
        "rqworker",
        "rqscheduler",
        "schedule_periodic_jobs",
        "cleanup_notifications",
    }
)


class CoreConfig(AppConfig):
    """Configuration class for the core application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "core"

    def ready(self) -> None:
        """Configure logging and start the in-process reminder scheduler."""
        if getattr(settings, "TEST_MODE", False):
            return

        from core.logging import cleanup_old_logs, setup_logging  # noqa: PLC0415

        setup_logging()
        cleanup_old_logs()

        if not settings.REMINDER_SCHEDULER_ENABLED:
            return
        if len(sys.argv) > 1 and sys.argv[1] in _NO_SCHEDULER_COMMANDS:
            return

        from core.services.reminder_scheduler import (  # noqa: PLC0415
            reminder_scheduler,
        )

        reminder_scheduler.start()
        structlog.get_logger(__name__).info("reminder_scheduler_started_in_process")
