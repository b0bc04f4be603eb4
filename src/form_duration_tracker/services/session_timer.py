"""Session-scoped start timestamp with optional expiry."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from form_duration_tracker.domain.tracking import EDIT_ACTIONS, SessionConfig

_logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    """String-valued key-value store scoped to one client."""

    def get(self, key: str) -> str | None:
        """Return the stored value, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a value under a key."""

    def delete(self, key: str) -> None:
        """Remove a key if present."""


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def format_timestamp(value: datetime) -> str:
    """Serialize a timestamp for the session store."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.isoformat()


def parse_timestamp(raw: str) -> datetime:
    """Parse a stored timestamp; naive values are read as UTC."""
    value = datetime.fromisoformat(raw)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


@dataclass
class SessionTimer:
    """Stores the form start time for one attribute in a session store."""

    config: SessionConfig
    clock: Callable[[], datetime] = field(default=utc_now)

    def initialize(self, store: SessionStore, current_action: str | None) -> None:
        """Record a fresh start time unless the action edits an existing record."""
        is_edit_action = current_action in EDIT_ACTIONS
        if self.config.auto_cleanup and not is_edit_action:
            self.cleanup(store)
        if is_edit_action:
            return

        now = self.clock()
        if self.config.expirable:
            self._purge_if_expired(store, now)
            store.set(
                self.config.expiry_key,
                format_timestamp(now + self.config.expiry_time),
            )
        store.set(self.config.session_key, format_timestamp(now))
        _logger.debug(
            "Initialized form timestamp: key=%s action=%s",
            self.config.session_key,
            current_action,
        )

    def read(self, store: SessionStore) -> datetime | None:
        """Return the stored start time, purging it when expired or malformed."""
        raw = store.get(self.config.session_key)
        if raw is None:
            return None

        now = self.clock()
        if self.config.expirable and self._is_expired(store, now):
            _logger.info("Form timestamp expired: key=%s", self.config.session_key)
            self.cleanup(store)
            return None

        try:
            return parse_timestamp(raw)
        except ValueError:
            _logger.warning(
                "Discarding malformed form timestamp: key=%s",
                self.config.session_key,
            )
            self.cleanup(store)
            return None

    def cleanup(self, store: SessionStore) -> None:
        """Forget the stored start time and its expiry marker."""
        store.delete(self.config.session_key)
        if self.config.expirable:
            store.delete(self.config.expiry_key)

    def preserve(self, store: SessionStore, value: datetime) -> None:
        """Overwrite the start time and restart the expiry window."""
        store.set(self.config.session_key, format_timestamp(value))
        if self.config.expirable:
            store.set(
                self.config.expiry_key,
                format_timestamp(self.clock() + self.config.expiry_time),
            )

    def _purge_if_expired(self, store: SessionStore, now: datetime) -> None:
        if self._is_expired(store, now):
            self.cleanup(store)

    def _is_expired(self, store: SessionStore, now: datetime) -> bool:
        raw = store.get(self.config.expiry_key)
        if raw is None:
            return False
        try:
            expires_at = parse_timestamp(raw)
        except ValueError:
            _logger.warning(
                "Malformed expiry marker treated as expired: key=%s",
                self.config.expiry_key,
            )
            return True
        return now > expires_at
