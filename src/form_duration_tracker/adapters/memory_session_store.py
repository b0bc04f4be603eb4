"""In-memory client session stores keyed by session cookie."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import uuid4

from form_duration_tracker.services.session_timer import SessionStore, utc_now


@dataclass
class InMemorySessionStore(SessionStore):
    """Dict-backed session store for a single client."""

    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def delete(self, key: str) -> None:
        self.values.pop(key, None)


@dataclass
class _SessionEntry:
    store: InMemorySessionStore
    expires_at: datetime


@dataclass
class InMemorySessionRegistry:
    """Holds one session store per issued session id.

    Only ids handed out by ``new_session_id`` are recognised. Entries expire
    ``ttl`` after their last use and are dropped when next looked up or when
    a new id is issued.
    """

    ttl: timedelta = timedelta(hours=24)
    clock: Callable[[], datetime] = field(default=utc_now)
    _sessions: dict[str, _SessionEntry] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self._sessions)

    def new_session_id(self) -> str:
        """Issue a fresh session id with an empty store."""
        now = self.clock()
        self._prune(now)
        session_id = uuid4().hex
        self._sessions[session_id] = _SessionEntry(
            store=InMemorySessionStore(), expires_at=now + self.ttl
        )
        return session_id

    def session_for(self, session_id: str) -> InMemorySessionStore | None:
        """Return the store for an issued, unexpired id and extend its lifetime."""
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        now = self.clock()
        if now >= entry.expires_at:
            self._sessions.pop(session_id, None)
            return None
        entry.expires_at = now + self.ttl
        return entry.store

    def open_session(
        self, session_id: str | None
    ) -> tuple[str, InMemorySessionStore, bool]:
        """Resolve a client-sent id, issuing a new one when it is not known.

        Returns the id, its store, and whether the id was newly issued.
        """
        if session_id:
            store = self.session_for(session_id)
            if store is not None:
                return session_id, store, False
        new_id = self.new_session_id()
        return new_id, self._sessions[new_id].store, True

    def _prune(self, now: datetime) -> None:
        expired = [
            key for key, entry in self._sessions.items() if now >= entry.expires_at
        ]
        for key in expired:
            self._sessions.pop(key, None)
