"""Phase-scoped validation callbacks for records."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from form_duration_tracker.domain.tracking import RecordErrors
from form_duration_tracker.services.session_timer import utc_now

CREATE = "create"
UPDATE = "update"
PHASES = frozenset({CREATE, UPDATE})


class ValidatedRecord(Protocol):
    """Record with an error sink and persisted-state tracking."""

    errors: RecordErrors

    @property
    def persisted(self) -> bool:
        """Return whether the record was saved before."""

    def attribute_was(self, name: str) -> object | None:
        """Return the last persisted value of an attribute."""


Validation = Callable[[ValidatedRecord, datetime], None]
BeforeValidation = Callable[[ValidatedRecord], None]


@dataclass
class ValidationHooks:
    """Registry of validations restricted to the create or update phase."""

    clock: Callable[[], datetime] = field(default=utc_now)
    _validations: list[tuple[str, str, Validation]] = field(default_factory=list)
    _before: list[tuple[str, BeforeValidation]] = field(default_factory=list)

    def validate(self, name: str, callback: Validation, on: str) -> None:
        """Register a named validation for a phase."""
        _check_phase(on)
        self._validations.append((on, name, callback))

    def before_validation(self, callback: BeforeValidation, on: str) -> None:
        """Register a callback that runs ahead of a phase's validations."""
        _check_phase(on)
        self._before.append((on, callback))

    def names(self, phase: str) -> list[str]:
        return [name for on, name, _ in self._validations if on == phase]

    def run(self, record: ValidatedRecord, phase: str) -> bool:
        """Run every callback for the phase and report validity."""
        _check_phase(phase)
        record.errors.clear()
        for on, callback in self._before:
            if on == phase:
                callback(record)
        now = self.clock()
        for on, _, validation in self._validations:
            if on == phase:
                validation(record, now)
        return not record.errors


def _check_phase(phase: str) -> None:
    if phase not in PHASES:
        raise ValueError(f"Unknown validation phase: {phase}")
