"""In-memory submission repository."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from form_duration_tracker.domain.submissions import FormSubmission
from form_duration_tracker.services.submissions import SubmissionRepository


@dataclass
class InMemorySubmissionRepository(SubmissionRepository):
    """Keeps submissions in a dict; used when Supabase is not configured."""

    rows: dict[UUID, dict[str, object]] = field(default_factory=dict)

    def create_submission(
        self, title: str, body: str, started_at: datetime | None
    ) -> UUID:
        submission_id = uuid4()
        self.rows[submission_id] = {
            "title": title,
            "body": body,
            "started_at": started_at,
        }
        return submission_id

    def get_submission(self, submission_id: UUID) -> FormSubmission | None:
        row = self.rows.get(submission_id)
        if row is None:
            return None
        submission = FormSubmission(
            title=str(row["title"]),
            body=str(row["body"]),
            started_at=row["started_at"],  # type: ignore[arg-type]
        )
        submission.mark_persisted(submission_id)
        return submission

    def update_submission(self, submission: FormSubmission) -> None:
        if submission.id is None or submission.id not in self.rows:
            raise RuntimeError("Cannot update an unsaved submission")
        self.rows[submission.id] = {
            "title": submission.title,
            "body": submission.body,
            "started_at": submission.started_at,
        }
