"""Login sessions for the HTML screens, kept in memory and keyed by a cookie."""

import secrets
import time
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

SESSION_COOKIE = "session"


class SessionStore:
    """In-memory login sessions holding the user resolved at login.

    Sessions are lost on restart.
    """

    def __init__(self, ttl_seconds: int = 8 * 3600) -> None:
        self.ttl_seconds = ttl_seconds
        self._sessions: dict[str, tuple[float, Any]] = {}

    def create(self, user: Any) -> str:
        """Store user and return the new session id."""
        self.cleanup_expired()
        session_id = secrets.token_urlsafe(32)
        self._sessions[session_id] = (time.monotonic() + self.ttl_seconds, user)
        logger.info("session_created", user_id=getattr(user, "user_id", None))
        return session_id

    def get(self, session_id: str | None) -> Any | None:
        """User of an active session; None when unknown or expired."""
        if not session_id:
            return None
        entry = self._sessions.get(session_id)
        if not entry:
            return None
        expires, user = entry
        if expires < time.monotonic():
            del self._sessions[session_id]
            return None
        return user

    def delete(self, session_id: str | None) -> None:
        """Drop session (logout)."""
        entry = self._sessions.pop(session_id, None) if session_id else None
        if entry:
            logger.info("session_deleted", user_id=getattr(entry[1], "user_id", None))

    def cleanup_expired(self) -> int:
        now = time.monotonic()
        expired = [k for k, (expires, _) in self._sessions.items() if expires < now]
        for key in expired:
            del self._sessions[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
