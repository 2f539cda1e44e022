"""Conversation Driver: turns a transcript into LLM requests.

Prompt selection is survey data (``SurveyDefinition``); the driver only
builds the history, picks the phase and calls the ``LLMClient``.
"""

from datetime import datetime

import structlog

from chatsurvey.core.config import Settings
from chatsurvey.domain.transcript import Message, Transcript
from chatsurvey.services.llm_client import ChatMessage, LLMClient
from chatsurvey.surveys import PromptContext, SessionDigest, SurveyDefinition

logger = structlog.get_logger(__name__)

MESSAGE_MAX_TOKENS = 2000
ANALYSIS_MAX_TOKENS = 4000
COURSE_REPORT_MAX_TOKENS = 3000

# User turns inspected for stuck signals, newest first
STUCK_WINDOW = 2


def build_history(conversation: list[Message]) -> list[ChatMessage]:
    """Stored conversation as Messages API turns.

    Leading assistant turns (the greeting) are dropped so the history opens
    with a user turn; consecutive turns of the same role are merged.
    """
    start = 0
    while start < len(conversation) and conversation[start].role == "assistant":
        start += 1

    history: list[ChatMessage] = []
    for msg in conversation[start:]:
        if history and history[-1]["role"] == msg.role:
            history[-1]["content"] += "\n\n" + msg.content
        else:
            history.append({"role": msg.role, "content": msg.content})
    return history


def _minutes_between(start: str, end: str) -> float:
    return (datetime.fromisoformat(end) - datetime.fromisoformat(start)).total_seconds() / 60


class ConversationDriver:
    def __init__(self, llm: LLMClient, settings: Settings):
        self.llm = llm
        self.checkin_interval = settings.checkin_interval_minutes

    def _checkin_due(self, survey: SurveyDefinition, transcript: Transcript, elapsed_minutes: float | None) -> bool:
        """True once per interval boundary crossed since the previous bot reply."""
        if not survey.checkin_enabled or elapsed_minutes is None or self.checkin_interval <= 0:
            return False
        replies = [m for m in transcript.conversation if m.role == "assistant"]
        previous = (
            _minutes_between(transcript.participant.start_time, replies[-1].timestamp) if replies else 0.0
        )
        return int(elapsed_minutes // self.checkin_interval) > int(previous // self.checkin_interval)

    def prompt_context(
        self,
        survey: SurveyDefinition,
        transcript: Transcript,
        message_count: int,
        elapsed_minutes: float | None = None,
    ) -> PromptContext:
        recent = transcript.user_messages()[-STUCK_WINDOW:]
        return PromptContext(
            message_count=message_count,
            phase=survey.select_phase(message_count),
            stuck=survey.is_stuck(recent),
            checkin_due=self._checkin_due(survey, transcript, elapsed_minutes),
            elapsed_minutes=elapsed_minutes,
        )

    async def next_reply(
        self,
        survey: SurveyDefinition,
        transcript: Transcript,
        user_message: str,
        elapsed_minutes: float | None = None,
    ) -> str:
        """Generate the bot's reply to ``user_message``.

        ``transcript`` may or may not already hold ``user_message`` as its last
        entry; it is sent exactly once either way.
        """
        conversation = list(transcript.conversation)
        last = conversation[-1] if conversation else None
        if last is None or last.role != "user" or last.content != user_message:
            conversation.append(Message(role="user", content=user_message))
            transcript = transcript.model_copy(update={"conversation": conversation})

        # Count as stored (before merging), greeting excluded
        message_count = len(conversation) - next(
            (i for i, m in enumerate(conversation) if m.role == "user"), len(conversation)
        )
        history = build_history(conversation)
        context = self.prompt_context(survey, transcript, message_count, elapsed_minutes)
        system = survey.build_system_prompt(context)

        logger.debug(
            "conversation_turn",
            survey_type=survey.key,
            message_count=message_count,
            phase=context.phase.name if context.phase else None,
            stuck=context.stuck,
            checkin_due=context.checkin_due,
        )
        return await self.llm.complete(system, history, MESSAGE_MAX_TOKENS)

    async def summarize(self, survey: SurveyDefinition, transcript: Transcript) -> str:
        history = build_history(transcript.conversation)
        instruction = survey.build_summary_instruction()
        if history and history[-1]["role"] == "user":
            history[-1]["content"] += "\n\n" + instruction
        else:
            history.append({"role": "user", "content": instruction})
        return await self.llm.complete(None, history, survey.summary_max_tokens)

    async def analyze(self, survey: SurveyDefinition, sessions: list[SessionDigest]) -> str:
        prompt = survey.build_analysis_prompt(sessions)
        return await self.llm.complete(None, [{"role": "user", "content": prompt}], ANALYSIS_MAX_TOKENS)

    async def course_report(self, survey: SurveyDefinition, transcript: Transcript) -> str:
        prompt = survey.build_course_report_prompt(transcript)
        return await self.llm.complete(None, [{"role": "user", "content": prompt}], COURSE_REPORT_MAX_TOKENS)
