"""Transcript Store: one JSON file per session, grouped by survey type.

Layout::

    <root>/<survey_type>/<sanitized-email>_<timestamp>.json

Every change is a full read-modify-write of the file. The store does not
serialise concurrent writers itself; callers hold the session's lock from
``chatsurvey.core.locking`` around ``append`` / ``complete`` / ``update``.
Writes land in a temporary file that is renamed over the target, so readers
never see a half-written transcript.
"""

import asyncio
import json
import os
import re
import tempfile
import uuid
from pathlib import Path

import structlog
from pydantic import ValidationError

from chatsurvey.core.exceptions import (
    CorruptDataError,
    InvalidFilenameError,
    NotFoundError,
    StorageError,
)
from chatsurvey.domain.transcript import (
    FileRef,
    Message,
    Participant,
    SessionStatus,
    Summary,
    Transcript,
    utc_now_iso,
)
from chatsurvey.surveys import get_survey

logger = structlog.get_logger(__name__)

_UNSAFE_CHARS_RE = re.compile(r"[^a-zA-Z0-9._-]")
_DOT_RUN_RE = re.compile(r"\.{2,}")


def sanitize_email(email: str) -> str:
    """``ada@x.edu`` -> ``ada_at_x.edu``; anything else unsafe becomes ``_``.

    Runs of dots collapse to one so the result always passes ``validate_filename``.
    """
    return _DOT_RUN_RE.sub(".", _UNSAFE_CHARS_RE.sub("_", email.replace("@", "_at_", 1)))


def filename_timestamp(iso_time: str) -> str:
    """``2025-01-01T12:00:00.000Z`` -> ``2025-01-01T12-00-00-000Z``."""
    return iso_time.replace(":", "-").replace(".", "-")


def validate_filename(filename: str) -> str:
    if not filename or ".." in filename or "/" in filename or "\\" in filename:
        raise InvalidFilenameError(f"Invalid filename: {filename!r}")
    return filename


class TranscriptStore:
    """Async facade over the per-session JSON files."""

    def __init__(self, root_dir: Path | str):
        self.root_dir = Path(root_dir)

    # ---------- Paths ----------

    def survey_dir(self, survey_type: str) -> Path:
        get_survey(survey_type)
        return self.root_dir / survey_type

    def path_for(self, ref: FileRef) -> Path:
        validate_filename(ref.filename)
        return self.survey_dir(ref.survey_type) / ref.filename

    def ensure_dirs(self, survey_types: list[str]) -> None:
        """Create the per-survey directories (called once at startup)."""
        for survey_type in survey_types:
            try:
                self.survey_dir(survey_type).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"Cannot create directory for {survey_type}: {e}") from e
            logger.info("data_directory_ready", survey_type=survey_type)

    # ---------- Blocking helpers (run in a worker thread) ----------

    def _load(self, path: Path) -> Transcript:
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise NotFoundError(f"Transcript not found: {path.name}") from None
        except OSError as e:
            raise StorageError(f"Cannot read {path.name}: {e}") from e
        try:
            return Transcript.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            raise CorruptDataError(f"Transcript {path.name} is not valid: {e}") from e

    def _save(self, path: Path, transcript: Transcript) -> None:
        payload = json.dumps(transcript.dump(), indent=2, ensure_ascii=False)
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=path.parent, prefix=".tmp-", suffix=".json", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Cannot write {path.name}: {e}") from e

    def _create(
        self, name: str, email: str, survey_type: str, password_hash: str | None
    ) -> tuple[FileRef, Transcript]:
        now = utc_now_iso()
        transcript = Transcript(
            session_id=str(uuid.uuid4()),
            survey_type=survey_type,
            status=SessionStatus.IN_PROGRESS,
            participant=Participant(name=name, email=email, start_time=now, password_hash=password_hash),
            conversation=[],
            last_updated=now,
        )

        directory = self.survey_dir(survey_type)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create directory for {survey_type}: {e}") from e

        stem = f"{sanitize_email(email)}_{filename_timestamp(now)}"
        filename = validate_filename(f"{stem}.json")
        suffix = 1
        while (directory / filename).exists():
            suffix += 1
            filename = f"{stem}-{suffix}.json"

        ref = FileRef(survey_type=survey_type, filename=filename)
        self._save(directory / filename, transcript)
        return ref, transcript

    def _append(self, ref: FileRef, role: str, content: str) -> Transcript:
        path = self.path_for(ref)
        transcript = self._load(path)
        now = utc_now_iso()
        transcript.conversation.append(Message(role=role, content=content, timestamp=now))
        transcript.last_updated = now
        self._save(path, transcript)
        return transcript

    def _complete(self, ref: FileRef, summary: Summary) -> Transcript:
        path = self.path_for(ref)
        transcript = self._load(path)
        now = utc_now_iso()
        transcript.status = SessionStatus.COMPLETED
        transcript.summary = summary
        transcript.completed_time = now
        transcript.last_updated = now
        self._save(path, transcript)
        return transcript

    def _update(self, ref: FileRef, fields: dict) -> Transcript:
        path = self.path_for(ref)
        transcript = self._load(path)
        data = transcript.dump()
        data.update(fields)
        try:
            updated = Transcript.model_validate(data)
        except ValidationError as e:
            raise CorruptDataError(f"Update would corrupt {ref}: {e}") from e
        self._save(path, updated)
        return updated

    def _list(self, survey_type: str) -> list[tuple[FileRef, Transcript]]:
        directory = self.survey_dir(survey_type)
        if not directory.is_dir():
            return []
        results = []
        for path in sorted(directory.glob("*.json")):
            if path.name.startswith(".tmp-"):
                continue
            try:
                results.append((FileRef(survey_type, path.name), self._load(path)))
            except (CorruptDataError, NotFoundError) as e:
                logger.warning("transcript_skipped", survey_type=survey_type, filename=path.name, error=str(e))
        return results

    def _delete(self, ref: FileRef) -> None:
        path = self.path_for(ref)
        try:
            path.unlink()
        except FileNotFoundError:
            raise NotFoundError("Session not found") from None
        except OSError as e:
            raise StorageError(f"Cannot delete {ref}: {e}") from e

    def _delete_all(self, survey_type: str) -> int:
        directory = self.survey_dir(survey_type)
        if not directory.is_dir():
            return 0
        deleted = 0
        for path in directory.glob("*.json"):
            try:
                path.unlink()
                deleted += 1
            except OSError as e:
                logger.error("transcript_delete_failed", survey_type=survey_type, filename=path.name, error=str(e))
        return deleted

    def _read_raw(self, ref: FileRef) -> str:
        path = self.path_for(ref)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise NotFoundError("Session not found") from None
        except OSError as e:
            raise StorageError(f"Cannot read {ref}: {e}") from e

    # ---------- Public async API ----------

    async def create(
        self, name: str, email: str, survey_type: str, password_hash: str | None = None
    ) -> tuple[FileRef, Transcript]:
        """Write a new in-progress transcript with an empty conversation."""
        ref, transcript = await asyncio.to_thread(self._create, name, email, survey_type, password_hash)
        logger.info("transcript_created", file=str(ref), session_id=transcript.session_id)
        return ref, transcript

    async def append(self, ref: FileRef, role: str, content: str) -> Transcript:
        """Append one message; earlier entries are never touched."""
        transcript = await asyncio.to_thread(self._append, ref, role, content)
        logger.debug("transcript_appended", file=str(ref), role=role, length=len(transcript.conversation))
        return transcript

    async def complete(self, ref: FileRef, summary: Summary) -> Transcript:
        """Mark completed and store the summary.

        Calling this twice overwrites the earlier summary; no history is kept.
        """
        transcript = await asyncio.to_thread(self._complete, ref, summary)
        logger.info("transcript_completed", file=str(ref))
        return transcript

    async def update(self, ref: FileRef, **fields) -> Transcript:
        """Set top-level fields other than the conversation (e.g. the course report cache)."""
        if "conversation" in fields:
            raise ValueError("conversation is append-only; use append()")
        return await asyncio.to_thread(self._update, ref, fields)

    async def read(self, ref: FileRef) -> Transcript:
        return await asyncio.to_thread(self._load, self.path_for(ref))

    async def read_raw(self, ref: FileRef) -> str:
        return await asyncio.to_thread(self._read_raw, ref)

    async def list_transcripts(self, survey_type: str) -> list[tuple[FileRef, Transcript]]:
        return await asyncio.to_thread(self._list, survey_type)

    async def delete(self, ref: FileRef) -> None:
        await asyncio.to_thread(self._delete, ref)
        logger.info("transcript_deleted", file=str(ref))

    async def delete_all(self, survey_type: str) -> int:
        deleted = await asyncio.to_thread(self._delete_all, survey_type)
        logger.info("transcripts_deleted", survey_type=survey_type, count=deleted)
        return deleted

    async def find_latest(
        self,
        survey_type: str,
        email: str,
        status: SessionStatus | None = None,
    ) -> tuple[FileRef, Transcript] | None:
        """Most recently started transcript for ``email`` (case-insensitive)."""
        wanted = email.strip().lower()
        matches = [
            (ref, t)
            for ref, t in await self.list_transcripts(survey_type)
            if t.participant.email.strip().lower() == wanted and (status is None or t.status == status)
        ]
        if not matches:
            return None
        return max(matches, key=lambda item: item[1].participant.start_time)
