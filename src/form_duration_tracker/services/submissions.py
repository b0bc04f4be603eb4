"""Create and update tracked form submissions."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from form_duration_tracker.domain.submissions import FormSubmission
from form_duration_tracker.services.validation import (
    CREATE,
    UPDATE,
    ValidationHooks,
)

_logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset({"title", "body", "started_at"})


class SubmissionRepository(Protocol):
    """Persistence interface for form submissions."""

    def create_submission(
        self, title: str, body: str, started_at: datetime | None
    ) -> UUID:
        """Persist a new submission and return its id."""

    def get_submission(self, submission_id: UUID) -> FormSubmission | None:
        """Return a submission by id, if present."""

    def update_submission(self, submission: FormSubmission) -> None:
        """Persist the current values of a submission."""


@dataclass
class SubmissionService:
    """Runs validation hooks around submission persistence."""

    repository: SubmissionRepository
    hooks: ValidationHooks

    def create(
        self, title: str, body: str = "", started_at: datetime | None = None
    ) -> FormSubmission:
        """Validate and save a new submission; errors stay on the record."""
        submission = FormSubmission(title=title, body=body, started_at=started_at)
        if not self.hooks.run(submission, CREATE):
            _logger.info(
                "Submission rejected: errors=%s", submission.errors.to_dict()
            )
            return submission
        submission_id = self.repository.create_submission(
            title=submission.title,
            body=submission.body,
            started_at=submission.started_at,
        )
        submission.mark_persisted(submission_id)
        return submission

    def get(self, submission_id: UUID) -> FormSubmission | None:
        return self.repository.get_submission(submission_id)

    def update(
        self, submission_id: UUID, changes: dict[str, object]
    ) -> FormSubmission | None:
        """Apply changes to a stored submission and save it when valid."""
        stored = self.repository.get_submission(submission_id)
        if stored is None:
            return None
        submission = FormSubmission(
            title=stored.title, body=stored.body, started_at=stored.started_at
        )
        submission.mark_persisted(submission_id)
        for name, value in changes.items():
            if name in _UPDATABLE_FIELDS:
                setattr(submission, name, value)
        if self.hooks.run(submission, UPDATE):
            self.repository.update_submission(submission)
            submission.mark_persisted(submission_id)
        return submission
