"""Delete notifications that were read longer ago than the retention window."""

from django.core.management.base import BaseCommand

from core.services.notification_service import notification_service


class Command(BaseCommand):
    """Purge old read notifications."""

    help = "Delete read notifications older than NOTIFICATION_RETENTION_DAYS"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--days",
            type=int,
            default=None,
            help="Retention in days (overrides settings)",
        )

    def handle(self, *_args, **options):
        """Run the cleanup and report the count."""
        deleted = notification_service.cleanup_read_notifications(days=options["days"])
        self.stdout.write(self.style.SUCCESS(f"Deleted {deleted} read notifications"))
