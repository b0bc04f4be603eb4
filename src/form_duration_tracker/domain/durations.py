"""Duration parsing and formatting helpers."""

import re
from datetime import timedelta

_DURATION_PATTERN = re.compile(
    r"^\s*(?P<amount>\d+(?:\.\d+)?)\.(?P<unit>seconds?|minutes?|hours?)\s*$"
)
_UNIT_SECONDS = {"second": 1, "minute": 60, "hour": 3600}


class ConfigurationError(ValueError):
    """Raised at setup time for malformed tracking options."""


def parse_duration(raw: str) -> timedelta:
    """Parse a duration like ``2.hours``, ``30.minutes`` or ``5.seconds``."""
    match = _DURATION_PATTERN.match(raw)
    if match is None:
        raise ConfigurationError(f"Invalid duration: {raw!r}")
    unit = match.group("unit").rstrip("s")
    return timedelta(seconds=float(match.group("amount")) * _UNIT_SECONDS[unit])


def coerce_duration(value: object) -> timedelta:
    """Normalize a timedelta, number of seconds or duration string."""
    if isinstance(value, timedelta):
        duration = value
    elif isinstance(value, bool):
        raise ConfigurationError(f"Invalid duration: {value!r}")
    elif isinstance(value, int | float):
        duration = timedelta(seconds=value)
    elif isinstance(value, str):
        duration = parse_duration(value)
    else:
        raise ConfigurationError(f"Invalid duration: {value!r}")
    if duration < timedelta(0):
        raise ConfigurationError(f"Duration must not be negative: {value!r}")
    return duration


def format_duration(duration: timedelta) -> str:
    """Render a duration back into the ``<n>.<unit>`` form."""
    seconds = duration.total_seconds()
    if seconds and seconds % 3600 == 0:
        return f"{int(seconds // 3600)}.hours"
    if seconds and seconds % 60 == 0:
        return f"{int(seconds // 60)}.minutes"
    return f"{format_seconds(seconds)}.seconds"


def format_seconds(seconds: float) -> str:
    """Format seconds without a trailing ``.0`` for whole values."""
    return str(int(seconds)) if float(seconds).is_integer() else str(seconds)


def buffer_time(max_duration: timedelta) -> timedelta:
    """Return 20% of ``max_duration`` clamped to [30 minutes, 2 hours]."""
    buffer = timedelta(seconds=int(max_duration.total_seconds() * 0.2))
    return min(max(buffer, timedelta(minutes=30)), timedelta(hours=2))


def recommended_expiry(max_duration: timedelta) -> timedelta:
    """Session expiry that comfortably outlives the max form duration."""
    return max_duration + buffer_time(max_duration)
