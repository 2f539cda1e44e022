"""Report Store: saved plain-text analysis and course reports.

Layout::

    <root>/analysis/<survey_type>-analysis-<timestamp>.txt
    <root>/courses/course-<participant>-<timestamp>.txt
"""

import asyncio
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

import structlog

from chatsurvey.core.exceptions import NotFoundError, StorageError, UnknownReportTypeError
from chatsurvey.domain.transcript import utc_now_iso
from chatsurvey.storage.transcript_store import filename_timestamp, validate_filename
from chatsurvey.surveys import get_survey

logger = structlog.get_logger(__name__)

REPORT_TYPES: tuple[str, ...] = ("analysis", "courses")

_NAME_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9]")


@dataclass(frozen=True)
class ReportInfo:
    filename: str
    size: int
    created: str


def _participant_slug(name: str) -> str:
    return _NAME_UNSAFE_RE.sub("_", name) or "participant"


def _report_timestamp() -> str:
    """``2025-01-01T12-00-00-000``: the ISO time without its ``Z``."""
    return filename_timestamp(utc_now_iso()).removesuffix("Z")


class ReportStore:
    def __init__(self, root_dir: Path | str):
        self.root_dir = Path(root_dir)

    def _dir(self, report_type: str) -> Path:
        if report_type not in REPORT_TYPES:
            raise UnknownReportTypeError(report_type)
        return self.root_dir / report_type

    def ensure_dirs(self) -> None:
        for report_type in REPORT_TYPES:
            try:
                self._dir(report_type).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"Cannot create reports directory {report_type}: {e}") from e

    def _write(self, report_type: str, filename: str, text: str) -> None:
        path = self._dir(report_type) / filename
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot write report {filename}: {e}") from e

    def _list(self, report_type: str) -> list[ReportInfo]:
        directory = self._dir(report_type)
        if not directory.is_dir():
            return []
        reports = []
        for path in directory.glob("*.txt"):
            stat = path.stat()
            created = datetime.fromtimestamp(stat.st_mtime, UTC)
            reports.append(
                ReportInfo(
                    filename=path.name,
                    size=stat.st_size,
                    created=created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
                )
            )
        reports.sort(key=lambda r: r.created, reverse=True)
        return reports

    def _read(self, report_type: str, filename: str) -> str:
        path = self._dir(report_type) / validate_filename(filename)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise NotFoundError("Report not found") from None
        except OSError as e:
            raise StorageError(f"Cannot read report {filename}: {e}") from e

    def _delete(self, report_type: str, filename: str) -> None:
        path = self._dir(report_type) / validate_filename(filename)
        try:
            path.unlink()
        except FileNotFoundError:
            raise NotFoundError("Report not found") from None
        except OSError as e:
            raise StorageError(f"Cannot delete report {filename}: {e}") from e

    async def save_analysis(self, survey_type: str, text: str) -> str:
        if survey_type != "all":
            get_survey(survey_type)
        filename = f"{survey_type}-analysis-{_report_timestamp()}.txt"
        await asyncio.to_thread(self._write, "analysis", filename, text)
        logger.info("analysis_saved", survey_type=survey_type, filename=filename)
        return filename

    async def save_course_report(self, survey_type: str, participant_name: str, text: str) -> str:
        get_survey(survey_type)
        filename = f"course-{_participant_slug(participant_name)}-{_report_timestamp()}.txt"
        await asyncio.to_thread(self._write, "courses", filename, text)
        logger.info("course_report_saved", survey_type=survey_type, filename=filename)
        return filename

    async def list_reports(self, report_type: str) -> list[ReportInfo]:
        """Newest first."""
        return await asyncio.to_thread(self._list, report_type)

    async def read(self, report_type: str, filename: str) -> str:
        return await asyncio.to_thread(self._read, report_type, filename)

    async def delete(self, report_type: str, filename: str) -> None:
        await asyncio.to_thread(self._delete, report_type, filename)
        logger.info("report_deleted", report_type=report_type, filename=filename)
