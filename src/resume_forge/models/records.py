"""Records that flow between pipeline stages."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from resume_forge.errors import ErrorKind, FailureReason
from resume_forge.models.document import DocumentFields, DocumentKind
from resume_forge.models.payload import Payload

if TYPE_CHECKING:
    from resume_forge.models.document import (
        CoverLetterDocument,
        ParsedResumeFields,
        ResumeDocument,
    )


@dataclass(frozen=True)
class GenerationRequest:
    """Input for one pipeline run."""

    kind: DocumentKind
    payload: Payload
    use_repair_variant: bool = False
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(frozen=True)
class ProviderAttempt:
    """Outcome of a single provider call."""

    provider_name: str
    raw_text: str = ""
    succeeded: bool = False
    error_kind: ErrorKind | None = None
    reason: FailureReason | None = None
    error_message: str = ""
    elapsed_seconds: float = 0.0


@dataclass(frozen=True)
class ValidatedDocument:
    """Schema-conformant document. Every schema field is present."""

    kind: DocumentKind
    fields: DocumentFields
    was_repaired: bool
    missing_fields: frozenset[str] = frozenset()
    repaired_fields: frozenset[str] = frozenset()  # kept, but malformed list elements were dropped
    parse_failed: bool = False

    def as_resume(self) -> ResumeDocument:
        return self._typed(DocumentKind.RESUME)

    def as_cover_letter(self) -> CoverLetterDocument:
        return self._typed(DocumentKind.COVER_LETTER)

    def as_parsed_resume(self) -> ParsedResumeFields:
        return self._typed(DocumentKind.PARSED_RESUME)

    def _typed(self, kind: DocumentKind):
        if self.kind is not kind:
            raise TypeError(f"Document is a {self.kind.value}, not a {kind.value}")
        return self.fields

    def to_json(self) -> dict:
        data = {
            "kind": self.kind.value,
            "fields": self.fields.model_dump(by_alias=True),
            "was_repaired": self.was_repaired,
            "missing_fields": sorted(self.missing_fields),
            "repaired_fields": sorted(self.repaired_fields),
        }
        if self.kind is DocumentKind.COVER_LETTER:
            data["plain_text"] = self.as_cover_letter().plain_text
        return data


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {ConfidenceLevel.HIGH: 0, ConfidenceLevel.MEDIUM: 1, ConfidenceLevel.LOW: 2}


@dataclass(frozen=True)
class ConfidenceReport:
    overall: ConfidenceLevel
    per_field: Mapping[str, ConfidenceLevel]

    def to_json(self) -> dict:
        return {
            "overall": self.overall.value,
            "fields": {name: level.value for name, level in self.per_field.items()},
        }


@dataclass(frozen=True)
class RenderedArtifact:
    html: str
    source_document: ValidatedDocument = field(repr=False, compare=False)


@dataclass
class GenerationResult:
    """Complete result of one pipeline run."""

    document: ValidatedDocument
    artifact: RenderedArtifact
    attempts: tuple[ProviderAttempt, ...]
    confidence: ConfidenceReport | None = None
    record_id: str | None = None
    elapsed_seconds: float = 0.0
    metadata: dict = field(default_factory=dict)
