"""Tests for the client session lifecycle."""

from datetime import UTC, datetime, timedelta
from unittest.mock import Mock

import pytest

from workspace_client.exceptions import SessionExpiredError
from workspace_client.session import ClientSession, SessionManager


class TestClientSession:
    def test_auth_headers(self):
        """Test the authorization headers."""
        session = ClientSession(token="abc", user_id="u1")

        assert session.auth_headers() == {"Authorization": "Bearer abc"}

    def test_expiry(self):
        """Test session expiry."""
        now = datetime(2024, 1, 1, tzinfo=UTC)
        session = ClientSession(token="abc", user_id="u1", expires_at=now)

        assert session.is_expired(now) is True
        assert session.is_expired(now - timedelta(seconds=1)) is False
        assert ClientSession(token="abc", user_id="u1").is_expired() is False


class TestSessionManager:
    def test_require_returns_active_session(self):
        """Test that require returns the active session."""
        manager = SessionManager()
        session = manager.login("abc", "u1")

        assert manager.require() is session

    def test_require_without_login(self):
        """Test that require fails without a login."""
        with pytest.raises(SessionExpiredError):
            SessionManager().require()

    def test_expired_session_is_cleared(self):
        """Test that an expired session is cleared."""
        manager = SessionManager()
        listener = Mock()
        manager.on_cleared(listener)
        expires_at = datetime(2024, 1, 1, tzinfo=UTC)
        manager.login("abc", "u1", expires_at=expires_at)

        with pytest.raises(SessionExpiredError):
            manager.require(now=expires_at + timedelta(minutes=1))

        assert manager.current is None
        listener.assert_called_once_with("expired")

    def test_logout_notifies_once(self):
        """Test that logout notifies listeners once."""
        manager = SessionManager()
        listener = Mock()
        manager.on_cleared(listener)
        manager.login("abc", "u1")

        manager.logout()
        manager.logout()

        listener.assert_called_once_with("logout")
