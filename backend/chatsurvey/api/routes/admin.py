"""Admin API routes: transcripts, analysis, course reports and saved reports.

Every route, including paths that match nothing, sits behind ``require_admin``.
"""

import json

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response

from chatsurvey.api.deps import get_analysis_service, get_report_store, get_transcript_store
from chatsurvey.api.schemas.admin import (
    AnalysisResponse,
    CourseReportResponse,
    DeleteAllResponse,
    DeleteSessionResponse,
    ReportInfo,
    ReportListResponse,
    SaveAnalysisRequest,
    SaveCourseReportRequest,
    SaveReportResponse,
    SessionListItem,
    SessionListResponse,
    SuccessResponse,
)
from chatsurvey.core.auth import require_admin
from chatsurvey.core.exceptions import NotFoundError
from chatsurvey.domain.transcript import FileRef
from chatsurvey.services.analysis_service import AnalysisService
from chatsurvey.storage.report_store import ReportStore
from chatsurvey.storage.transcript_store import TranscriptStore
from chatsurvey.surveys import resolve_survey_types

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


def _without_password_hash(record: dict) -> dict:
    participant = record.get("participant")
    if isinstance(participant, dict):
        participant.pop("password_hash", None)
    return record


# ---------- Sessions ----------


@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions(
    survey_type: str = Query("all"),
    store: TranscriptStore = Depends(get_transcript_store),
):
    """Session metadata across one or all survey types, newest first."""
    sessions = []
    for kind in resolve_survey_types(survey_type):
        for ref, transcript in await store.list_transcripts(kind):
            sessions.append(
                SessionListItem(
                    survey_type=kind,
                    filename=ref.filename,
                    participant=transcript.participant.model_dump(exclude={"password_hash"}, exclude_none=True),
                    status=transcript.status.value,
                    start_time=transcript.participant.start_time,
                    completed_time=transcript.completed_time,
                )
            )
    sessions.sort(key=lambda s: s.start_time, reverse=True)
    return SessionListResponse(sessions=sessions)


@router.get("/sessions/{survey_type}/{filename}")
async def download_session(survey_type: str, filename: str, store: TranscriptStore = Depends(get_transcript_store)):
    """Transcript file as a JSON attachment, minus the participant's password hash."""
    content = await store.read_raw(FileRef(survey_type, filename))
    try:
        record = json.loads(content)
    except ValueError:
        # Unparseable files go out untouched
        return Response(content=content, media_type="application/json", headers=_attachment(filename))
    if isinstance(record, dict):
        content = json.dumps(_without_password_hash(record), indent=2, ensure_ascii=False)
    return Response(content=content, media_type="application/json", headers=_attachment(filename))


@router.delete("/sessions/{survey_type}/{filename}", response_model=DeleteSessionResponse)
async def delete_session(survey_type: str, filename: str, store: TranscriptStore = Depends(get_transcript_store)):
    await store.delete(FileRef(survey_type, filename))
    return DeleteSessionResponse(success=True, message="Session deleted successfully")


@router.get("/sessions-all/{survey_type}")
async def download_all_sessions(survey_type: str, store: TranscriptStore = Depends(get_transcript_store)):
    """Every full transcript of one or all survey types, as one JSON attachment."""
    records = []
    for kind in resolve_survey_types(survey_type):
        for _, transcript in await store.list_transcripts(kind):
            record = _without_password_hash(transcript.dump())
            record["survey_type"] = kind
            records.append(record)
    return JSONResponse(content=records, headers=_attachment(f"all-sessions-{survey_type}.json"))


@router.delete("/sessions-all/{survey_type}", response_model=DeleteAllResponse)
async def delete_all_sessions(survey_type: str, store: TranscriptStore = Depends(get_transcript_store)):
    total = 0
    for kind in resolve_survey_types(survey_type):
        total += await store.delete_all(kind)
    return DeleteAllResponse(
        success=True,
        deleted_count=total,
        message=f"Successfully deleted {total} session(s)",
    )


# ---------- Analysis ----------


@router.post("/analyze/{survey_type}", response_model=AnalysisResponse)
async def analyze_sessions(survey_type: str, service: AnalysisService = Depends(get_analysis_service)):
    analysis = await service.analyze(survey_type)
    return AnalysisResponse(analysis=analysis)


@router.post("/course-report/{survey_type}/{filename}", response_model=CourseReportResponse)
async def generate_course_report(
    survey_type: str,
    filename: str,
    service: AnalysisService = Depends(get_analysis_service),
):
    """Course report for one completed transcript; generated once, then cached."""
    report = await service.course_report(survey_type, filename)
    return CourseReportResponse(report=report)


# ---------- Saved reports ----------


@router.post("/save-analysis", response_model=SaveReportResponse)
async def save_analysis(body: SaveAnalysisRequest, reports: ReportStore = Depends(get_report_store)):
    filename = await reports.save_analysis(body.survey_type, body.analysis)
    return SaveReportResponse(success=True, filename=filename)


@router.post("/save-course-report", response_model=SaveReportResponse)
async def save_course_report(body: SaveCourseReportRequest, reports: ReportStore = Depends(get_report_store)):
    filename = await reports.save_course_report(body.survey_type, body.participant_name, body.report)
    return SaveReportResponse(success=True, filename=filename)


@router.get("/reports", response_model=ReportListResponse)
async def list_reports(reports: ReportStore = Depends(get_report_store)):
    """Saved analysis and course reports, newest first."""
    analysis = await reports.list_reports("analysis")
    courses = await reports.list_reports("courses")
    return ReportListResponse(
        analysis=[ReportInfo(filename=r.filename, created=r.created, size=r.size) for r in analysis],
        courses=[ReportInfo(filename=r.filename, created=r.created, size=r.size) for r in courses],
    )


@router.get("/reports/{report_type}/{filename}")
async def download_report(report_type: str, filename: str, reports: ReportStore = Depends(get_report_store)):
    content = await reports.read(report_type, filename)
    return Response(content=content, media_type="text/plain", headers=_attachment(filename))


@router.delete("/reports/{report_type}/{filename}", response_model=SuccessResponse)
async def delete_report(report_type: str, filename: str, reports: ReportStore = Depends(get_report_store)):
    await reports.delete(report_type, filename)
    return SuccessResponse(success=True)


# Must stay last: unknown admin paths still require the password, then 404
@router.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def admin_not_found(path: str):
    raise NotFoundError("Not found")
