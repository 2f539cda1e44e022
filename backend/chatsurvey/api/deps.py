"""FastAPI dependencies wiring stores and services into routes.

The LLM client and session registry are created once in the app lifespan
and kept on ``app.state``; tests replace them through
``app.dependency_overrides``.
"""

from fastapi import Depends, Request

from chatsurvey.core.config import Settings, get_settings
from chatsurvey.core.locking import SessionLocks, get_session_locks
from chatsurvey.services.analysis_service import AnalysisService
from chatsurvey.services.conversation_driver import ConversationDriver
from chatsurvey.services.llm_client import LLMClient
from chatsurvey.services.survey_service import SurveyService
from chatsurvey.storage.report_store import ReportStore
from chatsurvey.storage.session_registry import SessionRegistry
from chatsurvey.storage.transcript_store import TranscriptStore


def get_llm_client(request: Request) -> LLMClient:
    return request.app.state.llm_client


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.session_registry


def get_transcript_store(settings: Settings = Depends(get_settings)) -> TranscriptStore:
    return TranscriptStore(settings.sessions_dir)


def get_report_store(settings: Settings = Depends(get_settings)) -> ReportStore:
    return ReportStore(settings.reports_dir)


def get_conversation_driver(
    llm: LLMClient = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
) -> ConversationDriver:
    return ConversationDriver(llm, settings)


def get_survey_service(
    store: TranscriptStore = Depends(get_transcript_store),
    registry: SessionRegistry = Depends(get_session_registry),
    locks: SessionLocks = Depends(get_session_locks),
    driver: ConversationDriver = Depends(get_conversation_driver),
) -> SurveyService:
    return SurveyService(store, registry, locks, driver)


def get_analysis_service(
    store: TranscriptStore = Depends(get_transcript_store),
    locks: SessionLocks = Depends(get_session_locks),
    driver: ConversationDriver = Depends(get_conversation_driver),
) -> AnalysisService:
    return AnalysisService(store, locks, driver)
