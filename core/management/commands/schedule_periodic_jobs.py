"""Register the periodic jobs on the RQ scheduler."""

from datetime import UTC, datetime

from django.conf import settings
from django.core.management.base import BaseCommand

import django_rq

from core.constants import CLEANUP_JOB_PATH, DEFAULT_QUEUE_NAME, REMINDER_TICK_JOB_PATH

# Daily cleanup at 03:00 UTC
CLEANUP_CRON = "0 3 * * *"


class Command(BaseCommand):
    """Replace the reminder tick and cleanup registrations on rq-scheduler.

    For deployments that run `rqscheduler` and `rqworker` instead of the
    in-process scheduler thread.
    """

    help = "Schedule the reminder tick and the read-notification cleanup"

    def handle(self, *_args, **_options):
        """Cancel previous registrations and schedule fresh ones."""
        scheduler = django_rq.get_scheduler(DEFAULT_QUEUE_NAME)
        managed = {REMINDER_TICK_JOB_PATH, CLEANUP_JOB_PATH}
        for job in scheduler.get_jobs():
            if job.func_name in managed:
                scheduler.cancel(job)

        interval = settings.REMINDER_SCHEDULER_INTERVAL_SECONDS
        scheduler.schedule(
            scheduled_time=datetime.now(UTC),
            func=REMINDER_TICK_JOB_PATH,
            interval=interval,
            repeat=None,
            result_ttl=interval * 2,
        )
        scheduler.cron(
            CLEANUP_CRON,
            func=CLEANUP_JOB_PATH,
            queue_name=DEFAULT_QUEUE_NAME,
        )
        self.stdout.write(
            self.style.SUCCESS(
                f"Scheduled reminder tick every {interval}s "
                f"and cleanup at '{CLEANUP_CRON}'"
            )
        )
