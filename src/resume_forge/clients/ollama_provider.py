"""Ollama-style local generation provider (POST /api/generate)."""

from __future__ import annotations

import logging

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from resume_forge.clients.base import resolve_model
from resume_forge.errors import FailureReason, ProviderUnavailable

logger = logging.getLogger(__name__)

# Connection-level hiccups are retried here; timeouts go straight to the caller's fallback
_RETRYABLE = (httpx.ConnectError, httpx.RemoteProtocolError, httpx.ReadError)


class OllamaProvider:
    name = "ollama"

    def __init__(
        self,
        host: str = "http://localhost:11434",
        timeout: float = 45.0,
        max_retries: int = 2,
        fast_model: str = "llama3",
        quality_model: str = "llama3",
        retry_wait: float = 1.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.client = client or httpx.AsyncClient(base_url=host, timeout=timeout)
        self.models = {"fast": fast_model, "quality": quality_model}
        self.max_retries = max_retries
        self.retry_wait = retry_wait

    async def invoke(
        self,
        prompt: str,
        model_hint: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        model = resolve_model(self.models, model_hint)
        body = {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "format": "json",
            "options": {"temperature": temperature, "num_predict": max_tokens},
        }
        logger.debug("Ollama call: model=%s", model)
        try:
            response = await self._post(body)
            data = response.json()
        except httpx.TimeoutException as exc:
            raise ProviderUnavailable(self.name, FailureReason.TIMEOUT, str(exc)) from exc
        except httpx.HTTPStatusError as exc:
            raise ProviderUnavailable(self.name, _status_reason(exc.response.status_code), str(exc)) from exc
        except httpx.TransportError as exc:
            raise ProviderUnavailable(self.name, FailureReason.NETWORK, str(exc)) from exc
        except ValueError as exc:
            raise ProviderUnavailable(self.name, FailureReason.BAD_STATUS, f"Non-JSON response body: {exc}") from exc

        if not isinstance(data, dict):
            raise ProviderUnavailable(self.name, FailureReason.BAD_STATUS, "Unexpected response body")
        return data.get("response") or ""

    async def _post(self, body: dict) -> httpx.Response:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.retry_wait, max=10),
            retry=retry_if_exception_type(_RETRYABLE),
            reraise=True,
        ):
            with attempt:
                response = await self.client.post("/api/generate", json=body)
                response.raise_for_status()
        return response

    async def aclose(self) -> None:
        await self.client.aclose()


def _status_reason(status: int) -> FailureReason:
    if status in (401, 403):
        return FailureReason.AUTH
    if status == 429:
        return FailureReason.RATE_LIMIT
    return FailureReason.BAD_STATUS
