"""Provider contract shared by every model backend."""

from __future__ import annotations

from types import ModuleType
from typing import Protocol

from resume_forge.errors import FailureReason

MODEL_TIERS = ("fast", "quality")


class Provider(Protocol):
    """Anything that turns a prompt into raw completion text."""

    name: str

    async def invoke(
        self,
        prompt: str,
        model_hint: str,
        max_tokens: int,
        temperature: float,
    ) -> str: ...


def resolve_model(models: dict[str, str], model_hint: str) -> str:
    """Map a tier hint to a concrete model id, defaulting to the quality tier."""
    return models.get(model_hint) or models["quality"]


def sdk_failure_reason(exc: Exception, sdk: ModuleType) -> FailureReason:
    """Classify an exception raised by the anthropic or openai SDK.

    Both SDKs expose the same exception hierarchy names.
    """
    if isinstance(exc, sdk.APITimeoutError):
        return FailureReason.TIMEOUT
    if isinstance(exc, (sdk.AuthenticationError, sdk.PermissionDeniedError)):
        return FailureReason.AUTH
    if isinstance(exc, sdk.RateLimitError):
        return FailureReason.RATE_LIMIT
    if isinstance(exc, sdk.APIConnectionError):
        return FailureReason.NETWORK
    if isinstance(exc, sdk.APIStatusError):
        return FailureReason.BAD_STATUS
    return FailureReason.UNKNOWN
