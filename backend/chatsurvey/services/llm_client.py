"""LLM client: the one seam between the survey service and the Messages API.

- ``LLMClient`` protocol: ``complete(system, messages, max_tokens) -> str``
- ``AnthropicLLMClient``: direct ``anthropic.AsyncAnthropic`` call, no retry
- ``FakeLLMClient``: scenario-based test double, also used for local runs
  without an API key
"""

from typing import Protocol, runtime_checkable

import anthropic
import structlog

from chatsurvey.core.exceptions import LLMServiceError

logger = structlog.get_logger(__name__)

ChatMessage = dict[str, str]


@runtime_checkable
class LLMClient(Protocol):
    async def complete(
        self,
        system: str | None,
        messages: list[ChatMessage],
        max_tokens: int,
    ) -> str:
        """Return the text of the model's reply.

        Args:
            system: System prompt, or None to send none
            messages: Alternating ``{"role", "content"}`` turns, starting with a user turn
            max_tokens: Upper bound on the reply length

        Raises:
            LLMServiceError: If the API call fails or returns no text
        """
        ...


class AnthropicLLMClient:
    def __init__(self, api_key: str, model: str, client: anthropic.AsyncAnthropic | None = None):
        self.model = model
        self._client = client or anthropic.AsyncAnthropic(api_key=api_key)

    async def complete(
        self,
        system: str | None,
        messages: list[ChatMessage],
        max_tokens: int,
    ) -> str:
        kwargs = {"model": self.model, "max_tokens": max_tokens, "messages": messages}
        if system:
            kwargs["system"] = system

        try:
            response = await self._client.messages.create(**kwargs)
        except anthropic.APIError as exc:
            logger.error(
                "llm_call_failed",
                model=self.model,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise LLMServiceError(f"Anthropic API call failed: {exc}") from exc

        for block in response.content:
            if getattr(block, "type", None) == "text":
                logger.debug(
                    "llm_call_complete",
                    model=self.model,
                    input_tokens=response.usage.input_tokens,
                    output_tokens=response.usage.output_tokens,
                )
                return block.text

        logger.error("llm_empty_response", model=self.model, stop_reason=response.stop_reason)
        raise LLMServiceError("Anthropic API returned no text content")

    async def close(self) -> None:
        await self._client.close()


FAKE_SUMMARY = """Let me pull together what I heard...

**Course Context:** Introductory biology course, 120 students, lecture plus lab.

**Usage:** Uses AI tools weekly for drafting course materials.

**Interest:** High interest in feedback support; moderate interest in grading.

**Concerns:** Worried students will skip the hard thinking in lab reports.

**Workshop Feedback:** The hands-on segment was the most useful part.

**NextEd Interest:** Would consider the Adoption Clinic next term.

**AI Concerns:** Academic integrity and accuracy of generated explanations.

**Path Forward:** A low-stakes pilot on one lab report with clear guidelines for students.

Does this accurately capture your thoughts? Anything to add or clarify?"""


class FakeLLMClient:
    """Scenario-based test double for ``LLMClient``.

    Scenarios:
        happy_path: a short follow-up question per turn; a full summary when the
            last user turn is a summary instruction; canned text otherwise
        llm_failure: every call raises ``LLMServiceError``

    Every call is recorded in ``calls`` for assertions.
    """

    VALID_SCENARIOS = {"happy_path", "llm_failure"}

    def __init__(self, scenario: str = "happy_path", replies: list[str] | None = None):
        if scenario not in self.VALID_SCENARIOS:
            raise ValueError(f"Unknown scenario: {scenario}. Valid scenarios: {self.VALID_SCENARIOS}")
        self.scenario = scenario
        self._replies = list(replies or [])
        self.calls: list[dict] = []

    async def complete(
        self,
        system: str | None,
        messages: list[ChatMessage],
        max_tokens: int,
    ) -> str:
        self.calls.append({"system": system, "messages": [dict(m) for m in messages], "max_tokens": max_tokens})

        if self.scenario == "llm_failure":
            raise LLMServiceError("Anthropic API rate limit exceeded. Retry after 60 seconds.")

        if self._replies:
            return self._replies.pop(0)

        last = messages[-1]["content"] if messages else ""
        if "Based on the conversation above" in last:
            return FAKE_SUMMARY
        if system is None:
            return "REPORT\n\nKey findings: participants want concrete examples and low-stakes pilots."
        turn = sum(1 for m in messages if m["role"] == "user")
        return f"Thanks for sharing that. Could you tell me a bit more? (follow-up {turn})"
