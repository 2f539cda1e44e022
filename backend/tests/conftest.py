"""Shared test fixtures for all test groups."""

import pytest

from chatsurvey.core.config import Settings
from chatsurvey.core.locking import SessionLocks
from chatsurvey.domain.transcript import Summary
from chatsurvey.services.analysis_service import AnalysisService
from chatsurvey.services.conversation_driver import ConversationDriver
from chatsurvey.services.llm_client import FakeLLMClient
from chatsurvey.services.survey_service import SurveyService
from chatsurvey.storage.report_store import ReportStore
from chatsurvey.storage.session_registry import InMemorySessionRegistry
from chatsurvey.storage.transcript_store import TranscriptStore

ADMIN_PASSWORD = "test-admin-secret"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment, with data under tmp_path."""
    return Settings(
        _env_file=None,
        data_dir=tmp_path / "data",
        static_dir=tmp_path / "public",
        admin_password=ADMIN_PASSWORD,
        anthropic_api_key="",
        session_registry_url="",
        checkin_interval_minutes=10,
    )


@pytest.fixture
def fake_llm():
    """Fresh FakeLLMClient with happy_path scenario (default)."""
    return FakeLLMClient(scenario="happy_path")


@pytest.fixture
def fake_llm_failing():
    """FakeLLMClient with llm_failure scenario."""
    return FakeLLMClient(scenario="llm_failure")


@pytest.fixture
def store(settings) -> TranscriptStore:
    return TranscriptStore(settings.sessions_dir)


@pytest.fixture
def report_store(settings) -> ReportStore:
    return ReportStore(settings.reports_dir)


@pytest.fixture
def registry() -> InMemorySessionRegistry:
    return InMemorySessionRegistry()


@pytest.fixture
def locks() -> SessionLocks:
    return SessionLocks()


@pytest.fixture
def driver(fake_llm, settings) -> ConversationDriver:
    return ConversationDriver(fake_llm, settings)


@pytest.fixture
def survey_service(store, registry, locks, driver) -> SurveyService:
    return SurveyService(store, registry, locks, driver)


@pytest.fixture
def analysis_service(store, locks, driver) -> AnalysisService:
    return AnalysisService(store, locks, driver)


@pytest.fixture
def completed_transcript(store):
    """Factory: write a completed transcript with a short conversation and summary."""

    async def _make(survey_type: str = "workshop", name: str = "Ada Lovelace", email: str = "ada@example.edu"):
        ref, _ = await store.create(name, email, survey_type)
        await store.append(ref, "assistant", f"Hi {name}! What stood out to you?")
        await store.append(ref, "user", "The hands-on prompting session.")
        await store.append(ref, "assistant", "What made it useful?")
        await store.append(ref, "user", "Seeing it applied to my own syllabus.")
        summary_text = "**Workshop Feedback:** Hands-on prompting was the highlight."
        transcript = await store.complete(ref, Summary(initial=summary_text, confirmed=summary_text))
        return ref, transcript

    return _make
