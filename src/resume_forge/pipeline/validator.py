"""Response validation and repair against a DocumentSchema.

``validate`` never raises on model output. Whatever the provider returned,
the result has every schema field: extracted when it had the expected
shape, defaulted otherwise. Scalar fields are defaulted, list elements are
dropped, so a partially valid list survives without empty placeholders.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import ValidationError

from resume_forge.models.records import ValidatedDocument
from resume_forge.prompts.schemas import DocumentSchema, FieldSpec, FieldType
from resume_forge.utils.json_parser import extract_json

logger = logging.getLogger(__name__)


class _Status(Enum):
    OK = "ok"
    REPAIRED = "repaired"
    MISSING = "missing"


def validate(raw: str | Mapping | None, schema: DocumentSchema) -> ValidatedDocument:
    """Validate raw model output against ``schema``, repairing as needed."""
    data, parse_failed = _parse(raw, schema)

    values: dict[str, Any] = {}
    missing: set[str] = set()
    repaired: set[str] = set()
    for spec in schema.fields:
        found, value = _lookup(data, spec)
        if found:
            value, status = _CHECKS[spec.type](value, spec)
        else:
            status = _Status.MISSING
        if status is _Status.MISSING:
            value = spec.default()
            missing.add(spec.name)
        elif status is _Status.REPAIRED:
            repaired.add(spec.name)
        values[spec.name] = value

    document = ValidatedDocument(
        kind=schema.kind,
        fields=schema.model.model_validate(values),
        was_repaired=parse_failed or bool(missing),
        missing_fields=frozenset(missing),
        repaired_fields=frozenset(repaired),
        parse_failed=parse_failed,
    )
    if document.was_repaired:
        logger.info(
            "Repaired %s output (parse_failed=%s, missing=%s)",
            schema.kind.value,
            parse_failed,
            sorted(missing),
        )
    if repaired:
        logger.info("Dropped malformed entries from %s: %s", schema.kind.value, sorted(repaired))
    return document


def _parse(raw: str | Mapping | None, schema: DocumentSchema) -> tuple[Mapping, bool]:
    """Return (object, strict_parse_failed). Falls back to an empty object."""
    if isinstance(raw, Mapping):
        return raw, False
    if not isinstance(raw, str):
        if raw is not None:
            logger.warning("Model output for %s is %s, not an object", schema.kind.value, type(raw).__name__)
        return {}, raw is None

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Strict JSON parse failed for %s output (%d chars)", schema.kind.value, len(raw))
        try:
            parsed = extract_json(raw)
        except ValueError:
            logger.warning("No JSON recoverable from %s output, using empty object", schema.kind.value)
            return {}, True
        return (parsed if isinstance(parsed, Mapping) else {}), True

    if not isinstance(parsed, Mapping):
        logger.warning("Model output for %s is JSON %s, not an object", schema.kind.value, type(parsed).__name__)
        return {}, False
    return parsed, False


def _lookup(data: Mapping, spec: FieldSpec) -> tuple[bool, Any]:
    if spec.parent:
        container = data.get(spec.parent)
        if isinstance(container, Mapping) and spec.key in container:
            return True, container[spec.key]
    # Flat output is accepted for nested fields too
    for key in (spec.key, spec.name):
        if key in data:
            return True, data[key]
    return False, None


def _check_string(value: Any, spec: FieldSpec) -> tuple[Any, _Status]:
    if not isinstance(value, str):
        return None, _Status.MISSING
    value = value.strip()
    if spec.required and not value:
        return None, _Status.MISSING
    return value, _Status.OK


def _check_string_list(value: Any, spec: FieldSpec) -> tuple[Any, _Status]:
    if not isinstance(value, list):
        return None, _Status.MISSING
    kept = [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return kept, _Status.OK if len(kept) == len(value) else _Status.REPAIRED


def _check_object_list(value: Any, spec: FieldSpec) -> tuple[Any, _Status]:
    if not isinstance(value, list):
        return None, _Status.MISSING
    kept = []
    for index, element in enumerate(value):
        if not isinstance(element, Mapping):
            logger.debug("Dropping %s[%d]: not an object", spec.name, index)
            continue
        try:
            kept.append(spec.item_model.model_validate(element))
        except ValidationError as exc:
            logger.debug("Dropping %s[%d]: %s", spec.name, index, exc.errors()[0]["msg"])
    if spec.id_prefix:
        kept = [
            item if item.id else item.model_copy(update={"id": f"{spec.id_prefix}-{position}"})
            for position, item in enumerate(kept, 1)
        ]
    return kept, _Status.OK if len(kept) == len(value) else _Status.REPAIRED


def _check_object(value: Any, spec: FieldSpec) -> tuple[Any, _Status]:
    if not isinstance(value, Mapping):
        return None, _Status.MISSING
    try:
        return spec.item_model.model_validate(value), _Status.OK
    except ValidationError:
        return None, _Status.MISSING


_CHECKS = {
    FieldType.STRING: _check_string,
    FieldType.STRING_LIST: _check_string_list,
    FieldType.OBJECT_LIST: _check_object_list,
    FieldType.OBJECT: _check_object,
}
