"""Unit tests for the LLM clients (Anthropic client against a mocked SDK, and the fake)."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest

from chatsurvey.core.exceptions import LLMServiceError
from chatsurvey.services.llm_client import (
    FAKE_SUMMARY,
    AnthropicLLMClient,
    FakeLLMClient,
    LLMClient,
)

pytestmark = pytest.mark.unit

MODEL = "claude-sonnet-4-20250514"


def _response(*blocks, stop_reason="end_turn"):
    return SimpleNamespace(
        content=list(blocks),
        stop_reason=stop_reason,
        usage=SimpleNamespace(input_tokens=10, output_tokens=5),
    )


def _sdk(response=None, error=None):
    sdk = MagicMock()
    sdk.messages.create = AsyncMock(return_value=response, side_effect=error)
    sdk.close = AsyncMock()
    return sdk


class TestAnthropicLLMClient:
    async def test_returns_first_text_block(self):
        sdk = _sdk(
            _response(
                SimpleNamespace(type="thinking", thinking="..."),
                SimpleNamespace(type="text", text="Hello there"),
            )
        )
        client = AnthropicLLMClient(api_key="k", model=MODEL, client=sdk)

        text = await client.complete("Be brief.", [{"role": "user", "content": "Hi"}], 2000)

        assert text == "Hello there"
        sdk.messages.create.assert_awaited_once_with(
            model=MODEL,
            max_tokens=2000,
            messages=[{"role": "user", "content": "Hi"}],
            system="Be brief.",
        )

    async def test_omits_empty_system_prompt(self):
        sdk = _sdk(_response(SimpleNamespace(type="text", text="ok")))
        client = AnthropicLLMClient(api_key="k", model=MODEL, client=sdk)

        await client.complete(None, [{"role": "user", "content": "Hi"}], 4000)

        assert "system" not in sdk.messages.create.await_args.kwargs

    async def test_api_error_becomes_service_error(self):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        sdk = _sdk(error=anthropic.APIConnectionError(request=request))
        client = AnthropicLLMClient(api_key="k", model=MODEL, client=sdk)

        with pytest.raises(LLMServiceError) as exc_info:
            await client.complete(None, [{"role": "user", "content": "Hi"}], 100)

        assert exc_info.value.public_message == "Text generation failed"

    async def test_no_text_content(self):
        sdk = _sdk(_response(stop_reason="max_tokens"))
        client = AnthropicLLMClient(api_key="k", model=MODEL, client=sdk)

        with pytest.raises(LLMServiceError):
            await client.complete(None, [{"role": "user", "content": "Hi"}], 100)

    async def test_close(self):
        sdk = _sdk()
        await AnthropicLLMClient(api_key="k", model=MODEL, client=sdk).close()
        sdk.close.assert_awaited_once()


class TestFakeLLMClient:
    def test_satisfies_protocol(self):
        assert isinstance(FakeLLMClient(), LLMClient)

    def test_unknown_scenario(self):
        with pytest.raises(ValueError):
            FakeLLMClient(scenario="nope")

    async def test_records_calls(self):
        fake = FakeLLMClient()

        await fake.complete("sys", [{"role": "user", "content": "Hi"}], 10)

        assert fake.calls == [{"system": "sys", "messages": [{"role": "user", "content": "Hi"}], "max_tokens": 10}]

    async def test_follow_up_counts_user_turns(self):
        reply = await FakeLLMClient().complete(
            "sys",
            [
                {"role": "user", "content": "a"},
                {"role": "assistant", "content": "b"},
                {"role": "user", "content": "c"},
            ],
            10,
        )
        assert reply.endswith("(follow-up 2)")

    async def test_summary_instruction(self):
        reply = await FakeLLMClient().complete(
            None, [{"role": "user", "content": "x\n\nBased on the conversation above, summarize."}], 10
        )
        assert reply == FAKE_SUMMARY

    async def test_scripted_replies_first(self):
        fake = FakeLLMClient(replies=["one", "two"])
        messages = [{"role": "user", "content": "x"}]

        assert [await fake.complete(None, messages, 1) for _ in range(3)][:2] == ["one", "two"]

    async def test_failure_scenario(self):
        with pytest.raises(LLMServiceError):
            await FakeLLMClient(scenario="llm_failure").complete(None, [], 10)
