"""Server-side login sessions.

Tokens handed to clients are random and opaque; the store keeps only their
HMAC-SHA256 digest keyed by the session secret. Each user holds at most one
live session: issuing a new one revokes the others.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

_TOKEN_BYTES = 32


@dataclass(frozen=True)
class _SessionRecord:
    user_id: str
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SessionStore:
    """In-process session registry shared by all request handlers."""

    def __init__(
        self,
        secret: str,
        ttl: timedelta,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._secret = secret.encode("utf-8")
        self._ttl = ttl
        self._clock = clock
        self._sessions: dict[str, _SessionRecord] = {}
        self._lock = threading.Lock()

    def _digest(self, token: str) -> str:
        return hmac.new(self._secret, token.encode("utf-8"), hashlib.sha256).hexdigest()

    def issue(self, user_id: str, *, replacing: str | None = None) -> str:
        """Start a fresh session for ``user_id`` and return its token.

        The presented token (``replacing``) and every existing session of the
        user are invalidated first.
        """
        token = secrets.token_urlsafe(_TOKEN_BYTES)
        with self._lock:
            if replacing:
                self._sessions.pop(self._digest(replacing), None)
            self._drop_user(user_id)
            self._sessions[self._digest(token)] = _SessionRecord(
                user_id=user_id, expires_at=self._clock() + self._ttl
            )
        return token

    def resolve(self, token: str) -> str | None:
        """Return the user id behind ``token``, or None if unknown or expired."""
        digest = self._digest(token)
        with self._lock:
            record = self._sessions.get(digest)
            if record is None:
                return None
            if record.expires_at <= self._clock():
                del self._sessions[digest]
                return None
            return record.user_id

    def revoke(self, token: str) -> bool:
        with self._lock:
            return self._sessions.pop(self._digest(token), None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _drop_user(self, user_id: str) -> None:
        stale = [key for key, record in self._sessions.items() if record.user_id == user_id]
        for key in stale:
            del self._sessions[key]
