"""In-process login sessions.

A session binds an opaque token, handed to the client in a cookie, to a user
id. Lifetime is fixed from creation and never extended by activity.
"""

import secrets
import threading
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from kanri.config import settings


@dataclass(frozen=True)
class LoginSession:
    user_id: int
    expires_at: datetime

    def expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class SessionStore:
    def __init__(self, max_age_seconds: int):
        self.max_age = timedelta(seconds=max_age_seconds)
        self._sessions: dict[str, LoginSession] = {}
        self._lock = threading.Lock()

    def create(self, user_id: int) -> str:
        token = secrets.token_urlsafe(32)
        now = self._now()
        entry = LoginSession(user_id=user_id, expires_at=now + self.max_age)
        with self._lock:
            self._drop_expired(now)
            self._sessions[token] = entry
        return token

    def resolve(self, token: str | None) -> int | None:
        """Return the user id bound to ``token``, or None if unknown or expired."""
        if not token:
            return None
        with self._lock:
            entry = self._sessions.get(token)
            if entry is None:
                return None
            if entry.expired(self._now()):
                del self._sessions[token]
                return None
            return entry.user_id

    def destroy(self, token: str | None) -> None:
        if not token:
            return
        with self._lock:
            self._sessions.pop(token, None)

    def purge_expired(self) -> int:
        with self._lock:
            return self._drop_expired(self._now())

    def _drop_expired(self, now: datetime) -> int:
        # caller holds the lock
        stale = [t for t, e in self._sessions.items() if e.expired(now)]
        for token in stale:
            del self._sessions[token]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)


session_store = SessionStore(settings.session_max_age_seconds)
