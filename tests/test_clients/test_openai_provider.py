"""Tests for OpenAIProvider (chat completions)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from resume_forge.clients.openai_provider import OpenAIProvider
from resume_forge.errors import FailureReason, ProviderUnavailable

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _make_completion(content: str | None) -> MagicMock:
    completion = MagicMock()
    completion.choices = [MagicMock()]
    completion.choices[0].message.content = content
    return completion


def _mock_client(mock_cls, **create_kwargs) -> MagicMock:
    mock_client = MagicMock()
    mock_client.chat.completions.create = AsyncMock(**create_kwargs)
    mock_cls.return_value = mock_client
    return mock_client


class TestOpenAIProvider:
    def test_init_passes_settings(self):
        with patch("resume_forge.clients.openai_provider.AsyncOpenAI") as mock_cls:
            OpenAIProvider(api_key="sk-test", base_url="http://proxy/v1", timeout=10.0, max_retries=0)
            mock_cls.assert_called_once_with(
                api_key="sk-test", base_url="http://proxy/v1", timeout=10.0, max_retries=0
            )

    async def test_requests_json_object(self):
        with patch("resume_forge.clients.openai_provider.AsyncOpenAI") as mock_cls:
            client = _mock_client(mock_cls, return_value=_make_completion('{"greeting": "Hi"}'))
            text = await OpenAIProvider(quality_model="gpt-test").invoke("prompt", "quality", 2048, 0.8)

        assert text == '{"greeting": "Hi"}'
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["max_tokens"] == 2048
        assert kwargs["temperature"] == 0.8

    async def test_json_mode_can_be_disabled(self):
        with patch("resume_forge.clients.openai_provider.AsyncOpenAI") as mock_cls:
            client = _mock_client(mock_cls, return_value=_make_completion("ok"))
            await OpenAIProvider(json_mode=False).invoke("prompt", "fast", 100, 0.1)

        assert "response_format" not in client.chat.completions.create.call_args.kwargs

    async def test_null_content_is_empty_string(self):
        with patch("resume_forge.clients.openai_provider.AsyncOpenAI") as mock_cls:
            _mock_client(mock_cls, return_value=_make_completion(None))
            assert await OpenAIProvider().invoke("prompt", "fast", 100, 0.1) == ""

    @pytest.mark.parametrize(
        ("error", "reason"),
        [
            (openai.APITimeoutError(request=REQUEST), FailureReason.TIMEOUT),
            (openai.APIConnectionError(request=REQUEST), FailureReason.NETWORK),
            (openai.AuthenticationError("bad key", response=httpx.Response(401, request=REQUEST), body=None),
             FailureReason.AUTH),
            (openai.RateLimitError("slow down", response=httpx.Response(429, request=REQUEST), body=None),
             FailureReason.RATE_LIMIT),
        ],
    )
    async def test_sdk_errors_become_provider_unavailable(self, error, reason):
        with patch("resume_forge.clients.openai_provider.AsyncOpenAI") as mock_cls:
            _mock_client(mock_cls, side_effect=error)
            with pytest.raises(ProviderUnavailable) as exc_info:
                await OpenAIProvider().invoke("prompt", "fast", 100, 0.1)

        assert exc_info.value.provider == "openai"
        assert exc_info.value.reason is reason
