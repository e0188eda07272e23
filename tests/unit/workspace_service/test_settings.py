"""Unit tests for the settings used by the test suite."""

from django.conf import settings
from django.test import SimpleTestCase

from core.models import User


class TestTestSettings(SimpleTestCase):
    """The suite runs without external services."""

    def test_database_is_sqlite(self):
        """Test that the database is SQLite."""
        database = settings.DATABASES["default"]

        self.assertEqual(database["ENGINE"], "django.db.backends.sqlite3")

    def test_cache_is_local_memory(self):
        """Test that the cache is local memory."""
        self.assertIn("LocMemCache", settings.CACHES["default"]["BACKEND"])

    def test_in_process_scheduler_is_disabled(self):
        """Test that the in-process scheduler is disabled."""
        self.assertTrue(settings.TEST_MODE)
        self.assertFalse(settings.REMINDER_SCHEDULER_ENABLED)

    def test_external_tables_are_managed_for_tests(self):
        """Test that external tables are managed in tests."""
        self.assertTrue(User._meta.managed)

    def test_exception_handler_is_installed(self):
        """Test that the exception handler is installed."""
        self.assertEqual(
            settings.REST_FRAMEWORK["EXCEPTION_HANDLER"],
            "core.exceptions.handlers.custom_exception_handler",
        )
