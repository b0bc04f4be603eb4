"""Supabase-backed submission repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from form_duration_tracker.domain.submissions import FormSubmission
from form_duration_tracker.services.session_timer import (
    format_timestamp,
    parse_timestamp,
)
from form_duration_tracker.services.submissions import SubmissionRepository


@dataclass
class SupabaseSubmissionRepository(SubmissionRepository):
    """Supabase implementation for form submissions."""

    client: Client

    def create_submission(
        self, title: str, body: str, started_at: datetime | None
    ) -> UUID:
        """Create a submission row and return its id."""
        response = (
            self.client.table("form_submissions")
            .insert(
                {
                    "title": title,
                    "body": body,
                    "started_at": (
                        format_timestamp(started_at) if started_at else None
                    ),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create submission")
        return UUID(response.data[0]["id"])

    def get_submission(self, submission_id: UUID) -> FormSubmission | None:
        """Return a submission by id, if present."""
        response = (
            self.client.table("form_submissions")
            .select("id, title, body, started_at")
            .eq("id", str(submission_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        submission = FormSubmission(
            title=row["title"],
            body=row.get("body") or "",
            started_at=(
                parse_timestamp(row["started_at"]) if row.get("started_at") else None
            ),
        )
        submission.mark_persisted(UUID(row["id"]))
        return submission

    def update_submission(self, submission: FormSubmission) -> None:
        """Update the stored values of a submission."""
        if submission.id is None:
            raise RuntimeError("Cannot update an unsaved submission")
        self.client.table("form_submissions").update(
            {
                "title": submission.title,
                "body": submission.body,
                "started_at": (
                    format_timestamp(submission.started_at)
                    if submission.started_at
                    else None
                ),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("id", str(submission.id)).execute()
