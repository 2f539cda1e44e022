"""Survey definition: everything that differs between survey types, as data.

A ``SurveyDefinition`` carries the greeting, the base system prompt, the
message-count phases, the topic list and the summary / analysis / course
report templates of one survey type. The conversation driver and the HTTP
routes are shared; only the definition varies.
"""

from dataclasses import dataclass, field

from chatsurvey.domain.coverage import Topic
from chatsurvey.domain.transcript import Transcript


@dataclass(frozen=True)
class Phase:
    """A stretch of the conversation, entered once ``min_messages`` is reached."""

    name: str
    min_messages: int
    guidance: str


@dataclass(frozen=True)
class PromptContext:
    """Per-turn inputs to system prompt selection."""

    message_count: int
    phase: Phase | None = None
    stuck: bool = False
    checkin_due: bool = False
    elapsed_minutes: float | None = None


@dataclass(frozen=True)
class SessionDigest:
    """What the aggregate analysis sees of one completed session."""

    participant: str
    summary: str
    snippets: list[str] = field(default_factory=list)


STUCK_GUIDANCE = """PARTICIPANT SEEMS STUCK:
Their last replies suggest they are unsure or want to move on. Acknowledge briefly
("That's fair" / "Totally okay"), do NOT press on the same theme, and offer a
concrete, easier entry point or move to a different topic."""

CHECKIN_GUIDANCE = """TIME CHECK-IN:
About {minutes} minutes have passed. Before your next question, briefly check in:
ask whether they'd like to keep going, wrap up soon, or pause and come back later."""

CONFIRMATION_REMINDER = """CRITICAL: After presenting the summary, you MUST end with: "{question}"

This question is required to trigger the review interface. Do not thank them or end the session yet."""


@dataclass(frozen=True)
class SurveyDefinition:
    key: str
    title: str
    description: str
    estimated_duration: str
    greeting_template: str
    base_prompt: str
    summary_instruction: str
    analysis_template: str
    confirmation_question: str = "Does this accurately capture your thoughts? Anything to add or clarify?"
    phases: tuple[Phase, ...] = ()
    topics: tuple[Topic, ...] = ()
    stuck_signals: tuple[str, ...] = ()
    course_report_template: str | None = None
    summary_max_tokens: int = 2000
    supports_login: bool = False
    checkin_enabled: bool = False
    show_timer: bool = True
    show_progress: bool = True

    # ---------- Greeting ----------

    def greeting(self, name: str) -> str:
        return self.greeting_template.format(name=name)

    # ---------- Prompt selection ----------

    def select_phase(self, message_count: int) -> Phase | None:
        """Return the last phase whose threshold ``message_count`` has reached."""
        current = None
        for phase in sorted(self.phases, key=lambda p: p.min_messages):
            if message_count >= phase.min_messages:
                current = phase
        return current

    def is_stuck(self, recent_user_messages: list[str]) -> bool:
        """True if any of the given user turns contains a stuck signal."""
        if not self.stuck_signals:
            return False
        for text in recent_user_messages:
            lower = text.lower().replace("’", "'")
            if any(signal in lower for signal in self.stuck_signals):
                return True
        return False

    def build_system_prompt(self, context: PromptContext) -> str:
        parts = [self.base_prompt]
        if context.phase is not None and context.phase.guidance:
            parts.append(f"CURRENT PHASE: {context.phase.name}\n{context.phase.guidance}")
        if context.stuck:
            parts.append(STUCK_GUIDANCE)
        if context.checkin_due and context.elapsed_minutes is not None:
            parts.append(CHECKIN_GUIDANCE.format(minutes=int(context.elapsed_minutes)))
        return "\n\n".join(parts)

    # ---------- Summary / analysis / course report ----------

    def build_summary_instruction(self) -> str:
        reminder = CONFIRMATION_REMINDER.format(question=self.confirmation_question)
        return f"{self.summary_instruction}\n\n{reminder}"

    def build_analysis_prompt(self, sessions: list[SessionDigest]) -> str:
        blocks = []
        for i, s in enumerate(sessions, start=1):
            snippets = "\n".join(f"- {text}" for text in s.snippets)
            blocks.append(
                f"SESSION {i} - {s.participant}\nSUMMARY:\n{s.summary}\n"
                f"FIRST RESPONSES:\n{snippets or '- (none)'}"
            )
        return self.analysis_template.format(
            count=len(sessions),
            sessions="\n---\n".join(blocks),
        )

    @property
    def supports_course_report(self) -> bool:
        return self.course_report_template is not None

    def build_course_report_prompt(self, transcript: Transcript) -> str:
        if self.course_report_template is None:
            raise ValueError(f"Survey {self.key!r} has no course report template")
        summary = transcript.summary
        summary_text = (summary.confirmed or summary.initial or "") if summary else ""
        conversation = "\n\n".join(
            f"{m.role.upper()}: {m.content}" for m in transcript.conversation
        )
        return self.course_report_template.format(
            participant=transcript.participant.name,
            summary=summary_text,
            user_edits=(summary.user_edits if summary else None) or "None",
            conversation=conversation,
        )

    def info(self) -> dict:
        """Public description for front ends (topics without keywords)."""
        return {
            "survey_type": self.key,
            "title": self.title,
            "description": self.description,
            "estimated_duration": self.estimated_duration,
            "supports_login": self.supports_login,
            "show_timer": self.show_timer,
            "show_progress": self.show_progress,
            "topics": [{"id": t.id, "label": t.label} for t in self.topics],
            "phases": [p.name for p in self.phases],
        }
