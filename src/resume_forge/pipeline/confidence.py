"""Per-field confidence for parsed resume fields."""

from __future__ import annotations

from dataclasses import dataclass, field

from resume_forge.models.records import ConfidenceLevel, ConfidenceReport, ValidatedDocument
from resume_forge.prompts.schemas import DocumentSchema, get_schema


@dataclass(frozen=True)
class ExtractionContext:
    ocr_used: bool = False
    missing_fields: frozenset[str] = field(default_factory=frozenset)


def score(
    validated: ValidatedDocument,
    context: ExtractionContext,
    schema: DocumentSchema | None = None,
) -> ConfidenceReport:
    """Score each schema field and derive the overall level.

    - defaulted (missing) -> low
    - repaired, recovered from damaged JSON, or OCR-derived -> medium
    - otherwise -> high

    ``overall`` is the worst level among required fields only.
    """
    schema = schema or get_schema(validated.kind)
    missing = context.missing_fields | validated.missing_fields

    per_field: dict[str, ConfidenceLevel] = {}
    for spec in schema.fields:
        if spec.name in missing:
            level = ConfidenceLevel.LOW
        elif context.ocr_used or validated.parse_failed or spec.name in validated.repaired_fields:
            level = ConfidenceLevel.MEDIUM
        else:
            level = ConfidenceLevel.HIGH
        per_field[spec.name] = level

    overall = max(
        (per_field[name] for name in schema.required_fields()),
        key=lambda level: level.severity,
        default=ConfidenceLevel.HIGH,
    )
    return ConfidenceReport(overall=overall, per_field=per_field)
