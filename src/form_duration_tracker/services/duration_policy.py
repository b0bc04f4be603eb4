"""Time-window validation for tracked form start times."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from form_duration_tracker.domain.durations import format_seconds
from form_duration_tracker.domain.tracking import (
    BLANK_MESSAGE,
    FUTURE_MESSAGE,
    MAX_DURATION_MESSAGE,
    MIN_DURATION_MESSAGE,
    PolicyConfig,
)
from form_duration_tracker.services.validation import (
    CREATE,
    UPDATE,
    ValidatedRecord,
    ValidationHooks,
)

_logger = logging.getLogger(__name__)

FUTURE_TOLERANCE = timedelta(seconds=1)


@dataclass(frozen=True)
class DurationPolicy:
    """Checks a record's tracked attribute against a policy config."""

    attribute: str
    config: PolicyConfig

    def attach(self, hooks: ValidationHooks) -> None:
        """Register this policy's checks on the validation hooks."""
        hooks.validate(
            f"{self.attribute}_presence",
            lambda record, _now: self.check_presence(record),
            on=CREATE,
        )
        if self.config.prevent_future:
            hooks.validate(
                f"{self.attribute}_not_in_future", self.check_not_future, on=CREATE
            )
        if self.config.max_duration is not None:
            hooks.validate(
                f"{self.attribute}_max_duration", self.check_max_duration, on=CREATE
            )
        if self.config.min_duration is not None:
            hooks.validate(
                f"{self.attribute}_min_duration", self.check_min_duration, on=CREATE
            )
        if self.config.prevent_update:
            hooks.before_validation(
                lambda record: self.enforce_immutability(
                    record, record.attribute_was(self.attribute)
                ),
                on=UPDATE,
            )

    def check_presence(self, record: ValidatedRecord) -> None:
        if self._value(record) is None:
            record.errors.add(self.attribute, BLANK_MESSAGE)

    def check_not_future(self, record: ValidatedRecord, now: datetime) -> None:
        started_at = self._value(record)
        if started_at is None:
            return
        if started_at > now + FUTURE_TOLERANCE:
            record.errors.add(self.attribute, FUTURE_MESSAGE)

    def check_max_duration(self, record: ValidatedRecord, now: datetime) -> None:
        started_at = self._value(record)
        max_duration = self.config.max_duration
        if started_at is None or max_duration is None:
            return
        if now - started_at > max_duration:
            minutes = max_duration.total_seconds() / 60.0
            record.errors.add(
                self.attribute, MAX_DURATION_MESSAGE.format(minutes=minutes)
            )

    def check_min_duration(self, record: ValidatedRecord, now: datetime) -> None:
        started_at = self._value(record)
        min_duration = self.config.min_duration
        if started_at is None or min_duration is None:
            return
        if now - started_at < min_duration:
            seconds = format_seconds(min_duration.total_seconds())
            record.errors.add(
                self.attribute, MIN_DURATION_MESSAGE.format(seconds=seconds)
            )

    def enforce_immutability(
        self, record: ValidatedRecord, previous_value: object | None
    ) -> None:
        """Revert a change to the tracked attribute on a persisted record."""
        if not record.persisted or previous_value is None:
            return
        if getattr(record, self.attribute, None) != previous_value:
            _logger.info(
                "Reverting change to immutable attribute: attribute=%s",
                self.attribute,
            )
            setattr(record, self.attribute, previous_value)

    def _value(self, record: ValidatedRecord) -> datetime | None:
        value = getattr(record, self.attribute, None)
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
