"""Participant-facing operations: start, message, summary, complete, login.

Every mutation of a session runs under that session's lock, so concurrent
requests for one session are applied one after another.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from chatsurvey.core.exceptions import InvalidCredentialsError, NotFoundError
from chatsurvey.core.locking import SessionLocks
from chatsurvey.core.passwords import hash_password, verify_password
from chatsurvey.domain.coverage import covered_topics
from chatsurvey.domain.summary_classifier import is_summary_message
from chatsurvey.domain.transcript import Message, SessionStatus, Summary, Transcript, utc_now_iso
from chatsurvey.services.conversation_driver import ConversationDriver
from chatsurvey.storage.session_registry import SessionEntry, SessionRegistry
from chatsurvey.storage.transcript_store import TranscriptStore
from chatsurvey.surveys import get_survey

logger = structlog.get_logger(__name__)

RESUME_MESSAGE = "Welcome back, {name}! Your progress was saved. Let's pick up where we left off."


@dataclass(frozen=True)
class StartResult:
    session_id: str
    message: str


@dataclass(frozen=True)
class MessageResult:
    message: str
    is_summary: bool
    covered_topics: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class LoginResult:
    session_id: str
    conversation: list[Message]
    message: str


def elapsed_minutes(transcript: Transcript, now: datetime | None = None) -> float:
    now = now or datetime.now(UTC)
    started = datetime.fromisoformat(transcript.participant.start_time)
    return max((now - started).total_seconds() / 60, 0.0)


class SurveyService:
    def __init__(
        self,
        store: TranscriptStore,
        registry: SessionRegistry,
        locks: SessionLocks,
        driver: ConversationDriver,
    ):
        self.store = store
        self.registry = registry
        self.locks = locks
        self.driver = driver

    async def _entry(self, survey_type: str, session_id: str) -> SessionEntry:
        """Registry entry for a live session of ``survey_type``.

        Raises:
            NotFoundError: unknown, completed, or belonging to another survey type
        """
        entry = await self.registry.lookup(session_id)
        if entry is None or entry.file_ref.survey_type != survey_type:
            raise NotFoundError("Session not found")
        return entry

    async def start(self, survey_type: str, name: str, email: str, password: str | None = None) -> StartResult:
        """Create the transcript, greet the participant and register the session."""
        survey = get_survey(survey_type)
        password_hash = hash_password(password) if password and survey.supports_login else None

        ref, transcript = await self.store.create(name, email, survey_type, password_hash=password_hash)
        greeting = survey.greeting(name)
        async with self.locks.lock(transcript.session_id):
            await self.store.append(ref, "assistant", greeting)
            await self.registry.register(
                transcript.session_id,
                SessionEntry(file_ref=ref, started_at=transcript.participant.start_time),
            )

        logger.info(
            "session_started",
            survey_type=survey_type,
            session_id=transcript.session_id,
            file=str(ref),
            resumable=password_hash is not None,
        )
        return StartResult(session_id=transcript.session_id, message=greeting)

    async def message(self, survey_type: str, session_id: str, text: str) -> MessageResult:
        """Persist the user turn, ask the model, persist and return the reply.

        The user turn is kept even when the model call fails.
        """
        survey = get_survey(survey_type)
        entry = await self._entry(survey_type, session_id)

        async with self.locks.lock(session_id):
            transcript = await self.store.append(entry.file_ref, "user", text)
            reply = await self.driver.next_reply(
                survey, transcript, text, elapsed_minutes=elapsed_minutes(transcript)
            )
            transcript = await self.store.append(entry.file_ref, "assistant", reply)

        # Greeting excluded: it names topics the bot has not asked about yet
        bot_texts = [m.content for m in transcript.conversation[1:] if m.role == "assistant"]
        result = MessageResult(
            message=reply,
            is_summary=is_summary_message(reply, survey_type),
            covered_topics=covered_topics(bot_texts, list(survey.topics)),
        )
        logger.info(
            "message_processed",
            survey_type=survey_type,
            session_id=session_id,
            messages=len(transcript.conversation),
            is_summary=result.is_summary,
        )
        return result

    async def summary(self, survey_type: str, session_id: str) -> str:
        """Generate a summary of the conversation so far; nothing is persisted."""
        survey = get_survey(survey_type)
        entry = await self._entry(survey_type, session_id)
        transcript = await self.store.read(entry.file_ref)
        text = await self.driver.summarize(survey, transcript)
        logger.info("summary_generated", survey_type=survey_type, session_id=session_id)
        return text

    async def complete(
        self,
        survey_type: str,
        session_id: str,
        summary: str | None,
        user_edits: str | None = None,
    ) -> Transcript:
        """Store the confirmed summary, mark the transcript completed and evict the session."""
        entry = await self._entry(survey_type, session_id)
        final = Summary(initial=summary, confirmed=summary, user_edits=user_edits or None)

        async with self.locks.lock(session_id):
            transcript = await self.store.complete(entry.file_ref, final)
            await self.registry.evict(session_id)

        logger.info("session_completed", survey_type=survey_type, session_id=session_id, file=str(entry.file_ref))
        return transcript

    async def login(self, survey_type: str, email: str, password: str) -> LoginResult:
        """Resume the participant's latest in-progress session.

        Raises:
            InvalidCredentialsError: no resumable session for ``email``, or wrong password
        """
        survey = get_survey(survey_type)
        if not survey.supports_login:
            raise NotFoundError("Session not found")

        found = await self.store.find_latest(survey_type, email, status=SessionStatus.IN_PROGRESS)
        if found is None:
            logger.info("login_failed", survey_type=survey_type, reason="no_session")
            raise InvalidCredentialsError()

        ref, transcript = found
        stored_hash = transcript.participant.password_hash
        if not stored_hash or not verify_password(password, stored_hash):
            logger.info("login_failed", survey_type=survey_type, reason="bad_password", file=str(ref))
            raise InvalidCredentialsError()

        async with self.locks.lock(transcript.session_id):
            await self.registry.register(
                transcript.session_id,
                SessionEntry(file_ref=ref, started_at=utc_now_iso()),
            )

        logger.info("session_resumed", survey_type=survey_type, session_id=transcript.session_id, file=str(ref))
        return LoginResult(
            session_id=transcript.session_id,
            conversation=transcript.conversation,
            message=RESUME_MESSAGE.format(name=transcript.participant.name),
        )
