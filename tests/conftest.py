"""Pytest configuration and shared fixtures."""

import os
from unittest.mock import patch

import django
from django.core.cache import cache
from django.test import Client

import pytest

# Configure Django settings for tests
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "workspace_service.settings_test")
django.setup()

from tests.factories import create_user, make_access_token  # noqa: E402


@pytest.fixture(autouse=True)
def _clear_cache():
    """Start every test without scheduler locks or cached tokens."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Provide Django test client."""
    return Client()


@pytest.fixture
def user(db):
    """Persisted owner of notifications and reminders."""
    return create_user()


@pytest.fixture
def other_user(db):
    """A second owner, for ownership checks."""
    return create_user()


@pytest.fixture
def auth_headers(user):
    """Authorization header for `user` with the notification:user scope."""
    return {"Authorization": f"Bearer {make_access_token(user.user_id)}"}


@pytest.fixture
def mock_queue():
    """Patch the RQ queue used by channel dispatch."""
    with patch("core.services.channels.django_rq.get_queue") as get_queue:
        yield get_queue.return_value
