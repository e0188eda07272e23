"""Development server that creates missing tables instead of checking migrations.

The `core` app ships without migration files; its tables are created with
`migrate --run-syncdb`. This command runs that step on startup so a fresh
local database works without a separate setup command.
"""

from django.core.management import call_command
from django.core.management.commands.runserver import Command as RunServer
from django.db.utils import OperationalError


class Command(RunServer):
    """runserver variant for local development."""

    help = "Start development server, creating missing tables first"

    def check_migrations(self, *_args, **_kwargs):
        """Sync tables instead of warning about unapplied migrations."""
        try:
            call_command("migrate", run_syncdb=True, verbosity=0)
        except OperationalError as e:
            # Degraded mode: readiness reports the database as down
            self.stdout.write(
                self.style.WARNING(f"Skipping table sync, database unavailable: {e}")
            )
            return
        self.stdout.write(self.style.SUCCESS("Database tables are up to date"))
