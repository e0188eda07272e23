"""Run the reminder scheduler in the foreground."""

import signal

from django.core.management.base import BaseCommand

from core.services.reminder_scheduler import ReminderScheduler


class Command(BaseCommand):
    """Tick the reminder scheduler until interrupted."""

    help = "Fire due reminders every REMINDER_SCHEDULER_INTERVAL_SECONDS"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--once",
            action="store_true",
            help="Run a single tick and exit",
        )
        parser.add_argument(
            "--interval",
            type=int,
            default=None,
            help="Seconds between ticks (overrides settings)",
        )

    def handle(self, *_args, **options):
        """Run one tick or loop until SIGINT/SIGTERM."""
        scheduler = ReminderScheduler(interval_seconds=options["interval"])

        if options["once"]:
            result = scheduler.tick()
            if result is None:
                self.stdout.write(self.style.WARNING("Another tick is running"))
                return
            self.stdout.write(
                self.style.SUCCESS(
                    f"Fired {result.fired} of {result.due} due reminders "
                    f"({result.skipped} skipped, {result.failed} failed)"
                )
            )
            return

        def _shutdown(_signum, _frame):
            scheduler.stop()

        signal.signal(signal.SIGTERM, _shutdown)
        self.stdout.write(
            f"Reminder scheduler running every {scheduler.interval_seconds}s"
        )
        try:
            scheduler.run_forever()
        except KeyboardInterrupt:
            scheduler.stop()
        self.stdout.write("Reminder scheduler stopped")
