"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from resume_forge.errors import ConfigError

PROVIDER_NAMES = ("anthropic", "openai", "ollama")


@dataclass(frozen=True)
class LLMConfig:
    primary_provider: str = "openai"
    secondary_provider: str | None = "ollama"
    timeout: float = 45.0  # seconds, per provider call
    max_retries: int = 2

    def __post_init__(self):
        if self.primary_provider not in PROVIDER_NAMES:
            raise ConfigError(f"llm.primary_provider must be one of {PROVIDER_NAMES}")
        if self.secondary_provider is not None:
            if self.secondary_provider not in PROVIDER_NAMES:
                raise ConfigError(f"llm.secondary_provider must be one of {PROVIDER_NAMES}")
            if self.secondary_provider == self.primary_provider:
                raise ConfigError("llm.secondary_provider must differ from primary_provider")
        if not 1 <= self.timeout <= 600:
            raise ConfigError("llm.timeout must be between 1 and 600 seconds")
        if not 0 <= self.max_retries <= 10:
            raise ConfigError("llm.max_retries must be between 0 and 10")


@dataclass(frozen=True)
class AnthropicConfig:
    fast_model: str = "claude-haiku-4-5-20251001"
    quality_model: str = "claude-sonnet-4-5-20250929"


@dataclass(frozen=True)
class OpenAIConfig:
    fast_model: str = "gpt-4.1-mini"
    quality_model: str = "gpt-4.1-mini"
    base_url: str | None = None


@dataclass(frozen=True)
class OllamaConfig:
    host: str = "http://localhost:11434"
    fast_model: str = "llama3"
    quality_model: str = "llama3"

    def __post_init__(self):
        if not self.host.startswith(("http://", "https://")):
            raise ConfigError("ollama.host must be an http(s) URL")


@dataclass(frozen=True)
class PipelineConfig:
    scanned_text_threshold: int = 200  # extracted text shorter than this is treated as a scan

    def __post_init__(self):
        if self.scanned_text_threshold < 0:
            raise ConfigError("pipeline.scanned_text_threshold must be >= 0")


@dataclass(frozen=True)
class EventsConfig:
    enabled: bool = True
    db_path: str = "~/.resume-forge/events.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class OutputConfig:
    out_dir: str = "./output"


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    anthropic: AnthropicConfig = field(default_factory=AnthropicConfig)
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)
    ollama: OllamaConfig = field(default_factory=OllamaConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    events: EventsConfig = field(default_factory=EventsConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        candidate = Path.cwd() / "config.yaml"
        if candidate.exists():
            path = candidate

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        anthropic=AnthropicConfig(**raw.get("anthropic", {})),
        openai=OpenAIConfig(**raw.get("openai", {})),
        ollama=OllamaConfig(**raw.get("ollama", {})),
        pipeline=PipelineConfig(**raw.get("pipeline", {})),
        events=EventsConfig(**raw.get("events", {})),
        output=OutputConfig(**raw.get("output", {})),
    )
