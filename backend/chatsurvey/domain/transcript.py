"""Transcript record: one participant's conversation plus metadata.

The on-disk JSON layout is the model's ``dump()``; unknown keys found in an
existing file survive a read/rewrite cycle.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


def utc_now_iso() -> str:
    """Current UTC time as ``2025-01-01T12:00:00.000Z``."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SessionStatus(StrEnum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Message(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    timestamp: str = Field(default_factory=utc_now_iso)


class Participant(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    email: str
    start_time: str = Field(default_factory=utc_now_iso)
    password_hash: str | None = None


class Summary(BaseModel):
    initial: str | None = None
    confirmed: str | None = None
    user_edits: str | None = None


class Transcript(BaseModel):
    model_config = ConfigDict(extra="allow")

    session_id: str
    survey_type: str
    status: SessionStatus = SessionStatus.IN_PROGRESS
    participant: Participant
    conversation: list[Message] = Field(default_factory=list)
    summary: Summary | None = None
    completed_time: str | None = None
    last_updated: str = Field(default_factory=utc_now_iso)
    course_report: str | None = None
    course_report_generated: str | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == SessionStatus.COMPLETED

    def user_messages(self) -> list[str]:
        return [m.content for m in self.conversation if m.role == "user"]

    def dump(self) -> dict:
        """JSON-ready dict; optional fields that were never set are left out.

        A stored summary always carries all three keys, ``user_edits: null``
        included.
        """
        data = self.model_dump(mode="json", exclude_none=True)
        if self.summary is not None:
            data["summary"] = self.summary.model_dump(mode="json")
        return data


@dataclass(frozen=True)
class FileRef:
    """Names one transcript file: ``<sessions_dir>/<survey_type>/<filename>``."""

    survey_type: str
    filename: str

    def __str__(self) -> str:
        return f"{self.survey_type}/{self.filename}"
