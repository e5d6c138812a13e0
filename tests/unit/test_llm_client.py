"""Tests for LLMClient with mocked litellm.acompletion."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from clarity_canvas.core.config import LLMConfig
from clarity_canvas.exceptions import JSONParseError, NonRetryableError, RetryableError
from clarity_canvas.providers.llm import LLMClient


def _make_config(**overrides: Any) -> LLMConfig:
    defaults: dict[str, Any] = {
        "provider": "openai",
        "model": "openai/gpt-4o-mini",
        "api_key": "test-key",
        "max_retries": 3,
    }
    defaults.update(overrides)
    return LLMConfig(**defaults)


def _mock_response(content: str = "test response") -> MagicMock:
    """Build a mock LiteLLM response object."""
    message = MagicMock()
    message.content = content

    choice = MagicMock()
    choice.message = message
    choice.finish_reason = "stop"

    response = MagicMock()
    response.choices = [choice]
    return response


class TestComplete:
    @pytest.mark.asyncio
    async def test_user_message_only(self) -> None:
        client = LLMClient(_make_config())
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response("hello")
            result = await client.complete("test prompt")

        assert result == "hello"
        kwargs = mock_acomp.call_args.kwargs
        assert kwargs["messages"] == [{"role": "user", "content": "test prompt"}]
        assert kwargs["model"] == "openai/gpt-4o-mini"
        assert kwargs["api_key"] == "test-key"
        assert "seed" not in kwargs

    @pytest.mark.asyncio
    async def test_system_prompt_and_seed(self) -> None:
        client = LLMClient(_make_config(seed=7))
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response()
            await client.complete("p", system_prompt="be brief")

        kwargs = mock_acomp.call_args.kwargs
        assert kwargs["messages"][0] == {"role": "system", "content": "be brief"}
        assert kwargs["seed"] == 7

    @pytest.mark.asyncio
    async def test_placeholder_key_not_sent(self) -> None:
        client = LLMClient(_make_config(provider="ollama", api_key="no-key"))
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response()
            await client.complete("p")
        assert "api_key" not in mock_acomp.call_args.kwargs

    @pytest.mark.asyncio
    async def test_none_content_becomes_empty_string(self) -> None:
        client = LLMClient(_make_config())
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response(None)  # type: ignore[arg-type]
            assert await client.complete("p") == ""


class TestRetries:
    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self) -> None:
        client = LLMClient(_make_config())
        with (
            patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp,
            patch("clarity_canvas.providers.llm.client.asyncio.sleep", new_callable=AsyncMock) as mock_sleep,
        ):
            mock_acomp.side_effect = [TimeoutError("slow"), _mock_response("ok")]
            result = await client.complete("p")

        assert result == "ok"
        assert mock_acomp.await_count == 2
        mock_sleep.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_exhausted_retries(self) -> None:
        client = LLMClient(_make_config(max_retries=2))
        with (
            patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp,
            patch("clarity_canvas.providers.llm.client.asyncio.sleep", new_callable=AsyncMock),
        ):
            mock_acomp.side_effect = TimeoutError("slow")
            with pytest.raises(RetryableError, match="after 2 retries"):
                await client.complete("p")
        assert mock_acomp.await_count == 2

    @pytest.mark.asyncio
    async def test_non_retryable_fails_fast(self) -> None:
        client = LLMClient(_make_config())
        with (
            patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp,
            patch.object(LLMClient, "_is_retryable", return_value=False),
        ):
            mock_acomp.side_effect = ValueError("bad request")
            with pytest.raises(NonRetryableError):
                await client.complete("p")
        assert mock_acomp.await_count == 1


class TestCompleteJson:
    @pytest.mark.asyncio
    async def test_parses_fenced_json(self) -> None:
        client = LLMClient(_make_config())
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response('Sure:\n```json\n{"chunks": []}\n```')
            assert await client.complete_json("p") == {"chunks": []}

    @pytest.mark.asyncio
    async def test_garbage_raises(self) -> None:
        client = LLMClient(_make_config())
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response("I cannot help with that.")
            with pytest.raises(JSONParseError):
                await client.complete_json("p")

    @pytest.mark.asyncio
    async def test_literal_empty_object_is_allowed(self) -> None:
        client = LLMClient(_make_config())
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response("{ }")
            assert await client.complete_json("p") == {}


class TestExtractJson:
    def test_plain(self) -> None:
        assert LLMClient.extract_json('{"a": 1}') == {"a": 1}

    def test_generic_fence(self) -> None:
        assert LLMClient.extract_json("```\n[1, 2]\n```") == [1, 2]

    def test_embedded_in_prose(self) -> None:
        assert LLMClient.extract_json('Here you go: {"a": {"b": "}"}} done') == {"a": {"b": "}"}}

    def test_trailing_comma(self) -> None:
        assert LLMClient.extract_json('{"a": [1, 2,],}') == {"a": [1, 2]}

    def test_python_none(self) -> None:
        assert LLMClient.extract_json('{"a": None}') == {"a": None}

    def test_unparseable(self) -> None:
        assert LLMClient.extract_json("no json here") == {}
