"""Document persistence port and the file-backed store the CLI uses."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from pathlib import Path
from typing import Protocol

from resume_forge.models.records import RenderedArtifact, ValidatedDocument

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    async def create_record(self, artifact: RenderedArtifact, document: ValidatedDocument) -> str: ...


class FileDocumentStore:
    """Writes ``<id>.html`` and ``<id>.json`` side by side in ``out_dir``."""

    def __init__(self, out_dir: str | Path = "./output"):
        self.out_dir = Path(out_dir)

    async def create_record(self, artifact: RenderedArtifact, document: ValidatedDocument) -> str:
        record_id = uuid.uuid4().hex
        await asyncio.to_thread(self._write, record_id, artifact, document)
        logger.info("Stored %s as %s", document.kind.value, record_id)
        return record_id

    def _write(self, record_id: str, artifact: RenderedArtifact, document: ValidatedDocument) -> None:
        self.out_dir.mkdir(parents=True, exist_ok=True)
        self.html_path(record_id).write_text(artifact.html, encoding="utf-8")
        self.json_path(record_id).write_text(
            json.dumps(document.to_json(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

    def html_path(self, record_id: str) -> Path:
        return self.out_dir / f"{record_id}.html"

    def json_path(self, record_id: str) -> Path:
        return self.out_dir / f"{record_id}.json"
