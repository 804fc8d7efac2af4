"""Model invoker: primary provider first, secondary only after a known failure."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

from resume_forge.clients.base import Provider
from resume_forge.errors import (
    AllProvidersUnavailable,
    ErrorKind,
    FailureReason,
    ProviderUnavailable,
)
from resume_forge.events.models import EventSink, PipelineEvent, emit
from resume_forge.models.records import ProviderAttempt
from resume_forge.prompts.registry import PromptTemplate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvocationResult:
    raw_text: str
    provider_name: str
    attempts: tuple[ProviderAttempt, ...]

    @property
    def used_fallback(self) -> bool:
        return len(self.attempts) > 1


class ModelInvoker:
    """Sends a prompt to the primary provider, falling back to the secondary.

    Calls are strictly sequential. The attempt log is returned with the
    result (or carried by AllProvidersUnavailable) and never kept on the
    invoker, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        primary: Provider,
        secondary: Provider | None = None,
        *,
        timeout: float | None = 60.0,
        events: EventSink | None = None,
    ):
        self.primary = primary
        self.secondary = secondary
        self.timeout = timeout
        self.events = events

    @property
    def providers(self) -> tuple[Provider, ...]:
        if self.secondary is None:
            return (self.primary,)
        return (self.primary, self.secondary)

    async def invoke(
        self,
        prompt: str,
        template: PromptTemplate,
        *,
        request_id: str = "unknown",
    ) -> InvocationResult:
        """Return the first successful provider's raw text.

        Raises AllProvidersUnavailable when every provider failed. Task
        cancellation propagates immediately without trying a fallback.
        """
        attempts: list[ProviderAttempt] = []
        for provider in self.providers:
            if attempts:
                previous = attempts[-1]
                logger.warning(
                    "Falling back from %s to %s for %s",
                    previous.provider_name,
                    provider.name,
                    template.kind.value,
                )
                await self._emit("fallback_used", request_id, template, provider.name,
                                 {"failed_provider": previous.provider_name})

            attempt = await self._attempt(provider, prompt, template, request_id)
            attempts.append(attempt)
            if attempt.succeeded:
                return InvocationResult(
                    raw_text=attempt.raw_text,
                    provider_name=provider.name,
                    attempts=tuple(attempts),
                )

        logger.error("All providers unavailable for %s", template.kind.value)
        await self._emit("all_providers_failed", request_id, template, None,
                         {"providers": [a.provider_name for a in attempts]})
        raise AllProvidersUnavailable(attempts)

    async def _attempt(
        self,
        provider: Provider,
        prompt: str,
        template: PromptTemplate,
        request_id: str,
    ) -> ProviderAttempt:
        start = time.monotonic()
        try:
            text = await asyncio.wait_for(
                provider.invoke(
                    prompt,
                    template.model_hint,
                    template.max_tokens,
                    template.temperature,
                ),
                timeout=self.timeout,
            )
        except asyncio.CancelledError:
            logger.info("Request cancelled during %s call", provider.name)
            await self._emit("cancelled", request_id, template, provider.name,
                             {"error_kind": ErrorKind.CANCELLED.value})
            raise
        except asyncio.TimeoutError:
            return await self._failed(provider, template, request_id, start,
                                      FailureReason.TIMEOUT, f"No response within {self.timeout}s")
        except ProviderUnavailable as exc:
            return await self._failed(provider, template, request_id, start, exc.reason, exc.message)
        except Exception as exc:
            logger.error("Unexpected error from provider %s", provider.name, exc_info=True)
            return await self._failed(provider, template, request_id, start, FailureReason.UNKNOWN, str(exc))

        elapsed = time.monotonic() - start
        logger.debug("%s responded in %.2fs", provider.name, elapsed)
        return ProviderAttempt(
            provider_name=provider.name,
            raw_text=text or "",
            succeeded=True,
            elapsed_seconds=elapsed,
        )

    async def _failed(
        self,
        provider: Provider,
        template: PromptTemplate,
        request_id: str,
        start: float,
        reason: FailureReason,
        message: str,
    ) -> ProviderAttempt:
        logger.warning("Provider %s failed (%s): %s", provider.name, reason.value, message)
        await self._emit("provider_failed", request_id, template, provider.name,
                         {"reason": reason.value, "message": message})
        return ProviderAttempt(
            provider_name=provider.name,
            succeeded=False,
            error_kind=ErrorKind.PROVIDER_UNAVAILABLE,
            reason=reason,
            error_message=message,
            elapsed_seconds=time.monotonic() - start,
        )

    async def _emit(self, name, request_id, template, provider, detail) -> None:
        await emit(
            self.events,
            PipelineEvent(
                event=name,
                request_id=request_id,
                document_kind=template.kind.value,
                provider=provider,
                detail=detail,
            ),
        )
