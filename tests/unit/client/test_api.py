"""Tests for WorkspaceApiClient status mapping."""

from datetime import UTC, datetime
from unittest.mock import Mock

import pytest
import requests
import responses
from responses import matchers

from workspace_client.api import WorkspaceApiClient
from workspace_client.exceptions import (
    ApiUnavailableError,
    SessionExpiredError,
    WorkspaceClientError,
)
from workspace_client.presentation import SNOOZE_MENU
from workspace_client.session import SessionManager

BASE_URL = "https://app.example.com/api/v1/workspace"


@pytest.fixture
def sessions():
    """Session manager with an active session."""
    manager = SessionManager()
    manager.login("token-123", "user-1")
    return manager


@pytest.fixture
def client(sessions):
    """API client bound to the test base URL."""
    return WorkspaceApiClient(BASE_URL, sessions)


@responses.activate
def test_list_notifications_sends_token_and_filters(client, sessions):
    """Test that the token and filters are sent."""
    responses.add(
        responses.GET,
        f"{BASE_URL}/notifications",
        json={"notifications": [], "unreadCount": 0, "total": 0},
        match=[
            matchers.query_param_matcher(
                {"limit": "5", "offset": "0", "unreadOnly": "true"}
            ),
            matchers.header_matcher({"Authorization": "Bearer token-123"}),
        ],
    )

    page = client.list_notifications(sessions.current, limit=5, unread_only=True)

    assert page["total"] == 0


@responses.activate
def test_unauthorized_clears_session(client, sessions):
    """Test that a 401 clears the session."""
    listener = Mock()
    sessions.on_cleared(listener)
    responses.add(responses.GET, f"{BASE_URL}/notifications/unread-count", status=401)

    with pytest.raises(SessionExpiredError):
        client.unread_count(sessions.current)

    assert sessions.current is None
    listener.assert_called_once_with("unauthorized")


@responses.activate
def test_server_error_is_unavailable(client, sessions):
    """Test that a server error is reported as unavailable."""
    responses.add(responses.PUT, f"{BASE_URL}/notifications/read-all", status=503)

    with pytest.raises(ApiUnavailableError) as exc_info:
        client.mark_all_read(sessions.current)

    assert exc_info.value.status_code == 503
    assert sessions.current is not None


@responses.activate
def test_client_error_carries_message(client, sessions):
    """Test that a client error carries the server message."""
    responses.add(
        responses.PUT,
        f"{BASE_URL}/notifications/abc/read",
        status=404,
        json={"error": "not_found", "message": "Notification not found"},
    )

    with pytest.raises(WorkspaceClientError) as exc_info:
        client.mark_read(sessions.current, "abc")

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Notification not found"


@responses.activate
def test_no_content_returns_none(client, sessions):
    """Test that 204 returns None."""
    responses.add(responses.DELETE, f"{BASE_URL}/notifications/abc", status=204)

    assert client.delete_notification(sessions.current, "abc") is None


@responses.activate
def test_connection_error_is_unavailable(client, sessions):
    """Test that a connection error is reported as unavailable."""
    responses.add(
        responses.GET,
        f"{BASE_URL}/notifications/vapid-key",
        body=requests.ConnectionError("refused"),
    )

    with pytest.raises(ApiUnavailableError):
        client.get_vapid_key(sessions.current)


@responses.activate
def test_subscribe_sends_device_name(client, sessions):
    """Test that subscribing sends the device name."""
    subscription = {"endpoint": "https://push.example.com/1", "keys": {}}
    responses.add(
        responses.POST,
        f"{BASE_URL}/notifications/subscribe",
        status=201,
        json={"id": 1},
        match=[
            matchers.json_params_matcher({**subscription, "deviceName": "Laptop"})
        ],
    )

    assert client.subscribe(sessions.current, subscription, "Laptop") == {"id": 1}


@responses.activate
def test_unsubscribe(client, sessions):
    """Test unsubscribing a device."""
    responses.add(
        responses.POST,
        f"{BASE_URL}/notifications/unsubscribe",
        json={"removed": True},
    )

    assert client.unsubscribe(sessions.current, "https://push.example.com/1") is True


@responses.activate
def test_snooze_menu_entry_is_sent_as_minutes(client, sessions):
    """Test a snooze menu choice is sent as a duration."""
    responses.add(
        responses.POST,
        f"{BASE_URL}/reminders/42/snooze",
        json={"id": 42, "isSnoozed": True},
        match=[matchers.json_params_matcher({"minutes": 180})],
    )

    reminder = client.snooze_reminder(sessions.current, 42, SNOOZE_MENU[1])

    assert reminder["isSnoozed"] is True


@responses.activate
def test_snooze_until_instant(client, sessions):
    """Test an absolute snooze time is sent as ISO 8601."""
    until = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
    responses.add(
        responses.POST,
        f"{BASE_URL}/reminders/42/snooze",
        json={"id": 42},
        match=[matchers.json_params_matcher({"until": "2024-01-01T12:00:00+00:00"})],
    )

    client.snooze_reminder(sessions.current, 42, until)
