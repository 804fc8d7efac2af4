"""Error taxonomy for the generation pipeline."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from resume_forge.models.records import ProviderAttempt


class ErrorKind(str, Enum):
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    ALL_PROVIDERS_UNAVAILABLE = "all_providers_unavailable"
    MALFORMED_MODEL_OUTPUT = "malformed_model_output"  # never raised, see ValidatedDocument.was_repaired
    CANCELLED = "cancelled"


class FailureReason(str, Enum):
    """Why a single provider call failed."""

    TIMEOUT = "timeout"
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    NETWORK = "network"
    BAD_STATUS = "bad_status"
    UNKNOWN = "unknown"


class PipelineError(Exception):
    kind: ErrorKind = ErrorKind.PROVIDER_UNAVAILABLE


class ProviderUnavailable(PipelineError):
    """A single provider call failed. Recovered locally by falling back."""

    kind = ErrorKind.PROVIDER_UNAVAILABLE

    def __init__(self, provider: str, reason: FailureReason, message: str = ""):
        self.provider = provider
        self.reason = reason
        self.message = message
        super().__init__(f"{provider} unavailable ({reason.value}): {message}")


class AllProvidersUnavailable(PipelineError):
    """Every configured provider failed; no document can be produced."""

    kind = ErrorKind.ALL_PROVIDERS_UNAVAILABLE

    def __init__(self, attempts: list[ProviderAttempt] | tuple[ProviderAttempt, ...]):
        self.attempts = tuple(attempts)
        names = ", ".join(a.provider_name for a in self.attempts) or "none"
        super().__init__(f"All providers unavailable (tried: {names})")


class ConfigError(ValueError):
    """Configuration value is unknown or out of range."""


class PromptTemplateError(ValueError):
    """A prompt template is inconsistent with its placeholder values."""
