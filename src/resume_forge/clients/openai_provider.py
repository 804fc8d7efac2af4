"""OpenAI-style chat completions provider."""

from __future__ import annotations

import logging

import openai
from openai import AsyncOpenAI

from resume_forge.clients.base import resolve_model, sdk_failure_reason
from resume_forge.errors import ProviderUnavailable

logger = logging.getLogger(__name__)


class OpenAIProvider:
    name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 45.0,
        max_retries: int = 2,
        fast_model: str = "gpt-4.1-mini",
        quality_model: str = "gpt-4.1-mini",
        json_mode: bool = True,
    ):
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
        )
        self.models = {"fast": fast_model, "quality": quality_model}
        self.json_mode = json_mode

    async def invoke(
        self,
        prompt: str,
        model_hint: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        model = resolve_model(self.models, model_hint)
        create_kwargs: dict = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if self.json_mode:
            create_kwargs["response_format"] = {"type": "json_object"}

        logger.debug("OpenAI call: model=%s", model)
        try:
            completion = await self.client.chat.completions.create(**create_kwargs)
        except openai.APIError as exc:
            raise ProviderUnavailable(self.name, sdk_failure_reason(exc, openai), str(exc)) from exc

        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""

    async def aclose(self) -> None:
        await self.client.close()
