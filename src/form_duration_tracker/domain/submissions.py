"""Domain model for tracked form submissions."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from form_duration_tracker.domain.tracking import RecordErrors

_TRACKED_FIELDS = ("title", "body", "started_at")


@dataclass
class FormSubmission:
    """A submitted form whose start time is tracked."""

    title: str
    body: str = ""
    started_at: datetime | None = None
    id: UUID | None = None
    errors: RecordErrors = field(default_factory=RecordErrors, compare=False)
    _persisted_values: dict[str, object] = field(
        default_factory=dict, repr=False, compare=False
    )

    @property
    def persisted(self) -> bool:
        return self.id is not None

    def attribute_was(self, name: str) -> object | None:
        """Return the value the attribute had when last persisted."""
        return self._persisted_values.get(name)

    def attribute_changed(self, name: str) -> bool:
        return getattr(self, name) != self._persisted_values.get(name)

    def mark_persisted(self, submission_id: UUID) -> None:
        """Record the id and snapshot current values as the persisted state."""
        self.id = submission_id
        self._persisted_values = {name: getattr(self, name) for name in _TRACKED_FIELDS}
