"""Claude API provider (messages endpoint)."""

from __future__ import annotations

import logging

import anthropic

from resume_forge.clients.base import resolve_model, sdk_failure_reason
from resume_forge.errors import ProviderUnavailable

logger = logging.getLogger(__name__)


class AnthropicProvider:
    """Async Claude client. Retries are left to the SDK's own max_retries."""

    name = "anthropic"

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        fast_model: str = "claude-haiku-4-5-20251001",
        quality_model: str = "claude-sonnet-4-5-20250929",
    ):
        kwargs: dict = {}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        if max_retries is not None:
            kwargs["max_retries"] = max_retries
        self.client = anthropic.AsyncAnthropic(**kwargs)
        self.models = {"fast": fast_model, "quality": quality_model}

    async def invoke(
        self,
        prompt: str,
        model_hint: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        """Send a prompt to Claude and return the text response."""
        model = resolve_model(self.models, model_hint)
        logger.debug("Anthropic call: model=%s", model)
        try:
            message = await self.client.messages.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as exc:
            raise ProviderUnavailable(self.name, sdk_failure_reason(exc, anthropic), str(exc)) from exc
        logger.debug(
            "Anthropic response: %d input, %d output tokens",
            message.usage.input_tokens,
            message.usage.output_tokens,
        )
        if not message.content:
            return ""
        return message.content[0].text

    async def aclose(self) -> None:
        await self.client.close()
