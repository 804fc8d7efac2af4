"""SQLite-backed pipeline event storage."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from pathlib import Path

from resume_forge.events.models import PipelineEvent

DEFAULT_DB_PATH = Path.home() / ".resume-forge" / "events.db"


class EventStore:
    """SQLite store for pipeline events with WAL mode."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS pipeline_events (
                    id TEXT PRIMARY KEY,
                    request_id TEXT NOT NULL,
                    timestamp TEXT NOT NULL,
                    event TEXT NOT NULL,
                    document_kind TEXT,
                    provider TEXT,
                    detail TEXT NOT NULL DEFAULT '{}'
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_events_request ON pipeline_events (request_id)"
            )

    def record(self, event: PipelineEvent) -> None:
        """Persist an event."""
        with self._connect() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO pipeline_events
                   (id, request_id, timestamp, event, document_kind, provider, detail)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    event.id,
                    event.request_id,
                    event.timestamp.isoformat(),
                    event.event,
                    event.document_kind,
                    event.provider,
                    json.dumps(event.detail, ensure_ascii=False, default=str),
                ),
            )

    def get_events(
        self,
        request_id: str | None = None,
        event: str | None = None,
        limit: int = 50,
    ) -> list[PipelineEvent]:
        """Retrieve events, newest first, optionally filtered."""
        clauses = []
        params: list = []
        if request_id is not None:
            clauses.append("request_id = ?")
            params.append(request_id)
        if event is not None:
            clauses.append("event = ?")
            params.append(event)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(limit)
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT * FROM pipeline_events {where} ORDER BY timestamp DESC LIMIT ?",
                params,
            ).fetchall()
        return [self._row_to_event(row) for row in rows]

    def get_stats(self) -> dict:
        """Aggregate counts: how often output needed repair or a fallback was used."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT event, COUNT(*) FROM pipeline_events GROUP BY event"
            ).fetchall()
        counts = {name: count for name, count in rows}
        created = counts.get("document_created", 0)
        return {
            "counts": counts,
            "documents": created,
            "repair_rate": (counts.get("output_repaired", 0) / created * 100) if created else 0.0,
            "fallback_rate": (counts.get("fallback_used", 0) / created * 100) if created else 0.0,
        }

    @staticmethod
    def _row_to_event(row: tuple) -> PipelineEvent:
        return PipelineEvent(
            id=row[0],
            request_id=row[1],
            timestamp=datetime.fromisoformat(row[2]),
            event=row[3],
            document_kind=row[4],
            provider=row[5],
            detail=json.loads(row[6]),
        )
