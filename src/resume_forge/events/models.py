"""Structured pipeline events: the queryable trace of fallbacks and repairs."""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime
from typing import Any, Literal, Protocol

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

EventName = Literal[
    "provider_failed",
    "fallback_used",
    "all_providers_failed",
    "cancelled",
    "output_repaired",
    "document_created",
]


class PipelineEvent(BaseModel):
    """Single event emitted during a pipeline run."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    request_id: str = "unknown"
    timestamp: datetime = Field(default_factory=datetime.now)
    event: EventName
    document_kind: str | None = None
    provider: str | None = None
    detail: dict[str, Any] = Field(default_factory=dict)


class EventSink(Protocol):
    def record(self, event: PipelineEvent) -> None: ...


class InMemoryEventLog:
    """Keeps events in a list; handy for tests and one-shot CLI runs."""

    def __init__(self):
        self.events: list[PipelineEvent] = []

    def record(self, event: PipelineEvent) -> None:
        self.events.append(event)

    def named(self, name: str) -> list[PipelineEvent]:
        return [e for e in self.events if e.event == name]


async def emit(sink: EventSink | None, event: PipelineEvent) -> None:
    """Record an event without letting a broken sink fail the pipeline.

    Sinks may block (EventStore writes to SQLite), so ``record`` runs in a
    worker thread and the event loop keeps serving other requests.
    """
    if sink is None:
        return
    try:
        await asyncio.to_thread(sink.record, event)
    except Exception:
        logger.error("Failed to record pipeline event %s", event.event, exc_info=True)
