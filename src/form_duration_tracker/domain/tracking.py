"""Configuration and error models for form duration tracking."""

from dataclasses import dataclass, field
from datetime import timedelta

DEFAULT_SESSION_EXPIRY_TIME = timedelta(hours=2)
EDIT_ACTIONS = frozenset({"edit", "update"})

BLANK_MESSAGE = "can't be blank"
FUTURE_MESSAGE = "can't be in the future"
MAX_DURATION_MESSAGE = "form took too long to complete (max: {minutes} minutes)"
MIN_DURATION_MESSAGE = "form was completed too quickly (min: {seconds} seconds)"


@dataclass(frozen=True)
class SessionConfig:
    """Session storage options for one tracked attribute."""

    attribute: str
    session_key: str
    expiry_key: str
    expirable: bool = True
    expiry_time: timedelta = DEFAULT_SESSION_EXPIRY_TIME
    on_actions: tuple[str, ...] = ()
    auto_params: tuple[str, ...] = ()
    param_key: str | None = None
    auto_cleanup: bool = True

    def as_dict(self) -> dict[str, object]:
        """Return the configuration as a plain mapping."""
        return {
            "attribute": self.attribute,
            "session_key": self.session_key,
            "expiry_key": self.expiry_key,
            "expiry_time": self.expiry_time.total_seconds(),
            "expirable": self.expirable,
            "on_actions": list(self.on_actions),
            "auto_params": list(self.auto_params),
            "param_key": self.param_key,
            "auto_cleanup": self.auto_cleanup,
        }


@dataclass(frozen=True)
class PolicyConfig:
    """Validation options for one tracked attribute."""

    prevent_future: bool = False
    prevent_update: bool = False
    max_duration: timedelta | None = None
    min_duration: timedelta | None = None

    def as_dict(self) -> dict[str, object]:
        """Return the configuration as a plain mapping."""
        return {
            "prevent_future": self.prevent_future,
            "prevent_update": self.prevent_update,
            "max_duration": (
                self.max_duration.total_seconds() if self.max_duration else None
            ),
            "min_duration": (
                self.min_duration.total_seconds() if self.min_duration else None
            ),
        }


@dataclass
class RecordErrors:
    """Keyed, human-readable validation messages attached to a record."""

    messages: dict[str, list[str]] = field(default_factory=dict)

    def add(self, attribute: str, message: str) -> None:
        self.messages.setdefault(attribute, []).append(message)

    def __getitem__(self, attribute: str) -> list[str]:
        return list(self.messages.get(attribute, []))

    def __bool__(self) -> bool:
        return any(self.messages.values())

    def __len__(self) -> int:
        return sum(len(items) for items in self.messages.values())

    def clear(self) -> None:
        self.messages.clear()

    def to_dict(self) -> dict[str, list[str]]:
        return {key: list(items) for key, items in self.messages.items() if items}
