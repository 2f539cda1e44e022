"""Admin-side generation: cross-session analysis and per-transcript course reports."""

import structlog

from chatsurvey.core.exceptions import CourseReportUnavailableError, NothingToAnalyzeError
from chatsurvey.core.locking import SessionLocks
from chatsurvey.domain.transcript import FileRef, Transcript, utc_now_iso
from chatsurvey.services.conversation_driver import ConversationDriver
from chatsurvey.storage.transcript_store import TranscriptStore
from chatsurvey.surveys import SessionDigest, get_survey

logger = structlog.get_logger(__name__)

# First user answers quoted per session in the analysis prompt
SNIPPETS_PER_SESSION = 5


def digest(transcript: Transcript) -> SessionDigest | None:
    """Analysis input for one transcript, or None if it is not a completed session."""
    summary = transcript.summary
    if not transcript.is_completed or summary is None:
        return None
    text = summary.confirmed or summary.initial
    if not text:
        return None
    return SessionDigest(
        participant=transcript.participant.name,
        summary=text,
        snippets=transcript.user_messages()[:SNIPPETS_PER_SESSION],
    )


class AnalysisService:
    def __init__(self, store: TranscriptStore, locks: SessionLocks, driver: ConversationDriver):
        self.store = store
        self.locks = locks
        self.driver = driver

    async def analyze(self, survey_type: str) -> str:
        """Aggregate report over every completed session of ``survey_type``.

        Raises:
            NothingToAnalyzeError: no sessions at all, or none completed with a summary
        """
        survey = get_survey(survey_type)
        transcripts = await self.store.list_transcripts(survey_type)
        if not transcripts:
            raise NothingToAnalyzeError("No sessions to analyze")

        digests = [d for _, t in transcripts if (d := digest(t)) is not None]
        if not digests:
            raise NothingToAnalyzeError("No completed sessions to analyze")

        logger.info("analysis_started", survey_type=survey_type, sessions=len(digests), total=len(transcripts))
        analysis = await self.driver.analyze(survey, digests)
        logger.info("analysis_complete", survey_type=survey_type, length=len(analysis))
        return analysis

    async def course_report(self, survey_type: str, filename: str) -> str:
        """Course report for one completed transcript, cached in the transcript itself."""
        survey = get_survey(survey_type)
        if not survey.supports_course_report:
            raise CourseReportUnavailableError(f"Course reports are not available for {survey_type} surveys")

        ref = FileRef(survey_type=survey_type, filename=filename)
        transcript = await self.store.read(ref)
        if not transcript.is_completed or transcript.summary is None:
            raise CourseReportUnavailableError("Can only generate reports for completed sessions")

        if transcript.course_report:
            logger.info("course_report_cached", file=str(ref))
            return transcript.course_report

        report = await self.driver.course_report(survey, transcript)
        async with self.locks.lock(transcript.session_id):
            await self.store.update(ref, course_report=report, course_report_generated=utc_now_iso())

        logger.info("course_report_generated", file=str(ref), length=len(report))
        return report
