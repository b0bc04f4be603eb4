"""Pydantic models for submission request payloads."""

from datetime import UTC, datetime

from pydantic import BaseModel, field_validator


class _TimestampedParams(BaseModel):
    """Reads naive ``started_at`` values as UTC."""

    started_at: datetime | None = None

    @field_validator("started_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class SubmissionParams(_TimestampedParams):
    """Fields accepted when creating a submission."""

    title: str
    body: str = ""


class SubmissionChanges(_TimestampedParams):
    """Fields accepted when updating a submission."""

    title: str | None = None
    body: str | None = None
