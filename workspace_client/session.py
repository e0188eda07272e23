"""Explicit client session passed to every API call.

A `ClientSession` is an immutable snapshot of the credentials obtained at
login. `SessionManager` owns its lifecycle: it is acquired by `login`,
cleared by `logout`, by expiry, or when the API rejects the token.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

import structlog

from workspace_client.exceptions import SessionExpiredError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ClientSession:
    """Bearer credentials of a logged-in user."""

    token: str
    user_id: str
    expires_at: datetime | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        """Whether the token is past its expiry. Sessions without one never expire."""
        if self.expires_at is None:
            return False
        return (now or datetime.now(UTC)) >= self.expires_at

    def auth_headers(self) -> dict[str, str]:
        """Authorization header for API requests."""
        return {"Authorization": f"Bearer {self.token}"}


class SessionManager:
    """Holds the current session and notifies listeners when it is cleared."""

    def __init__(self) -> None:
        """Initialize without a session."""
        self._session: ClientSession | None = None
        self._lock = threading.Lock()
        self._on_cleared: list[Callable[[str], None]] = []

    @property
    def current(self) -> ClientSession | None:
        """The active session, or None when logged out."""
        return self._session

    def login(
        self, token: str, user_id: str, expires_at: datetime | None = None
    ) -> ClientSession:
        """Acquire a session from credentials issued by the auth service."""
        session = ClientSession(token=token, user_id=user_id, expires_at=expires_at)
        with self._lock:
            self._session = session
        logger.info("client_session_started", user_id=user_id)
        return session

    def logout(self) -> None:
        """End the session at the user's request."""
        self.clear("logout")

    def require(self, now: datetime | None = None) -> ClientSession:
        """Return the active session.

        Raises:
            SessionExpiredError: If there is no session or it expired.
        """
        session = self._session
        if session is None:
            raise SessionExpiredError("Not logged in")
        if session.is_expired(now):
            self.clear("expired")
            raise SessionExpiredError()
        return session

    def clear(self, reason: str) -> None:
        """Drop the session and notify listeners (e.g. redirect to login)."""
        with self._lock:
            had_session = self._session is not None
            self._session = None
        if not had_session:
            return
        logger.info("client_session_cleared", reason=reason)
        for callback in list(self._on_cleared):
            callback(reason)

    def on_cleared(self, callback: Callable[[str], None]) -> None:
        """Register a callback receiving the reason whenever the session ends."""
        self._on_cleared.append(callback)
