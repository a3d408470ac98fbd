"""Pydantic models for version-control history."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def to_utc_string(date: datetime) -> str:
    """Render *date* as an ISO-8601 string in UTC."""
    if date.tzinfo is None:
        date = date.replace(tzinfo=UTC)
    return date.astimezone(UTC).isoformat().replace("+00:00", "Z")


class CommitRecord(BaseModel):
    """A single commit as reported by the backend."""

    model_config = ConfigDict(frozen=True)

    hash: str = Field(min_length=1)
    date: datetime = Field(description="Author date")
    message: str = Field(default="", description="Subject line")
    body: str = ""

    @field_validator("hash")
    @classmethod
    def validate_hash(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("hash cannot be empty or whitespace")
        return v


class ResolutionResult(BaseModel):
    """Latest change and latest tracked change of one file."""

    model_config = ConfigDict(frozen=True)

    latest_change: CommitRecord
    latest_tracked_change: CommitRecord
