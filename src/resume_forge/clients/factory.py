"""Build providers and the model invoker from configuration."""

from __future__ import annotations

from resume_forge.clients.anthropic_provider import AnthropicProvider
from resume_forge.clients.base import Provider
from resume_forge.clients.ollama_provider import OllamaProvider
from resume_forge.clients.openai_provider import OpenAIProvider
from resume_forge.config import AppConfig
from resume_forge.errors import ConfigError
from resume_forge.events.models import EventSink
from resume_forge.pipeline.invoker import ModelInvoker


def build_provider(name: str, config: AppConfig) -> Provider:
    llm = config.llm
    if name == "anthropic":
        return AnthropicProvider(
            timeout=llm.timeout,
            max_retries=llm.max_retries,
            fast_model=config.anthropic.fast_model,
            quality_model=config.anthropic.quality_model,
        )
    if name == "openai":
        return OpenAIProvider(
            base_url=config.openai.base_url,
            timeout=llm.timeout,
            max_retries=llm.max_retries,
            fast_model=config.openai.fast_model,
            quality_model=config.openai.quality_model,
        )
    if name == "ollama":
        return OllamaProvider(
            host=config.ollama.host,
            timeout=llm.timeout,
            max_retries=llm.max_retries,
            fast_model=config.ollama.fast_model,
            quality_model=config.ollama.quality_model,
        )
    raise ConfigError(f"Unsupported provider '{name}'")


def build_invoker(config: AppConfig, events: EventSink | None = None) -> ModelInvoker:
    primary = build_provider(config.llm.primary_provider, config)
    secondary = None
    if config.llm.secondary_provider:
        secondary = build_provider(config.llm.secondary_provider, config)
    # SDK timeouts apply per HTTP attempt; the invoker bounds the whole call including retries
    timeout = config.llm.timeout * (config.llm.max_retries + 1)
    return ModelInvoker(primary, secondary, timeout=timeout, events=events)
