"""Versioned prompt templates and the read-only registry that serves them."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from string import Formatter

from resume_forge.errors import PromptTemplateError
from resume_forge.models.document import DocumentKind
from resume_forge.models.payload import Payload
from resume_forge.prompts.schemas import DocumentSchema

logger = logging.getLogger(__name__)

# Filled in from the target schema, never from the payload
OUTPUT_FORMAT = "output_format"


def find_placeholders(text: str) -> frozenset[str]:
    """Return the ``{name}`` placeholders used in a template string."""
    names = set()
    for _, name, spec, conversion in Formatter().parse(text):
        if name is None:
            continue
        if not name.isidentifier() or spec or conversion:
            raise PromptTemplateError(f"Unsupported placeholder: {{{name}}}")
        names.add(name)
    return frozenset(names)


@dataclass(frozen=True)
class PromptTemplate:
    kind: DocumentKind
    version: str
    model_hint: str  # provider tier: "fast" or "quality"
    temperature: float
    max_tokens: int
    template_text: str
    placeholders: frozenset[str]
    target_schema: DocumentSchema
    repair_variant: bool = False

    def render(self, values: Mapping[str, str]) -> str:
        """Substitute every placeholder. Missing values are a programming error."""
        filled = dict(values)
        filled.setdefault(OUTPUT_FORMAT, self.target_schema.output_format())
        missing = self.placeholders - filled.keys()
        if missing:
            raise PromptTemplateError(
                f"{self.kind.value} v{self.version}: no value for {sorted(missing)}"
            )
        return self.template_text.format_map({k: filled[k] for k in self.placeholders})


ValueBuilder = Callable[[Payload], dict[str, str]]


@dataclass
class PromptRegistry:
    """Lookup of templates by (kind, repair variant), plus payload value builders."""

    _templates: dict[tuple[DocumentKind, bool], PromptTemplate] = field(default_factory=dict)
    _builders: dict[DocumentKind, ValueBuilder] = field(default_factory=dict)
    _value_keys: dict[DocumentKind, frozenset[str]] = field(default_factory=dict)

    def register(self, template: PromptTemplate) -> None:
        found = find_placeholders(template.template_text)
        if found != template.placeholders:
            raise PromptTemplateError(
                f"{template.kind.value} v{template.version}: declared placeholders "
                f"{sorted(template.placeholders)} but template uses {sorted(found)}"
            )
        if template.target_schema.kind is not template.kind:
            raise PromptTemplateError(
                f"{template.kind.value} v{template.version}: schema is for "
                f"{template.target_schema.kind.value}"
            )
        if template.kind in self._value_keys:
            _check_coverage(template, self._value_keys[template.kind])
        key = (template.kind, template.repair_variant)
        if key in self._templates:
            raise PromptTemplateError(f"Duplicate template for {key[0].value} (repair={key[1]})")
        self._templates[key] = template
        logger.debug("Registered prompt %s v%s (repair=%s)", template.kind.value, template.version, template.repair_variant)

    def register_builder(
        self, kind: DocumentKind, builder: ValueBuilder, value_keys: frozenset[str]
    ) -> None:
        """Attach the payload builder for ``kind``; ``value_keys`` are the keys it returns."""
        for template in self._templates.values():
            if template.kind is kind:
                _check_coverage(template, value_keys)
        self._builders[kind] = builder
        self._value_keys[kind] = frozenset(value_keys)

    def get(self, kind: DocumentKind, use_repair_variant: bool = False) -> PromptTemplate:
        try:
            return self._templates[(kind, use_repair_variant)]
        except KeyError:
            raise LookupError(
                f"No prompt template for {kind.value} (repair={use_repair_variant})"
            ) from None

    def templates(self) -> list[PromptTemplate]:
        return sorted(self._templates.values(), key=lambda t: (t.kind.value, t.repair_variant))

    def build_prompt(self, template: PromptTemplate, payload: Payload) -> str:
        """Turn a payload into the final prompt string for ``template``."""
        try:
            builder = self._builders[template.kind]
        except KeyError:
            raise PromptTemplateError(f"No value builder for {template.kind.value}") from None
        return template.render(builder(payload))


def _check_coverage(template: PromptTemplate, value_keys: frozenset[str]) -> None:
    uncovered = template.placeholders - {OUTPUT_FORMAT} - value_keys
    if uncovered:
        raise PromptTemplateError(
            f"{template.kind.value} v{template.version}: value builder does not supply "
            f"{sorted(uncovered)}"
        )


def default_registry() -> PromptRegistry:
    """Build the registry with every shipped template. Fails fast on bad templates."""
    from resume_forge.prompts import cover_letter, resume, resume_parsing

    registry = PromptRegistry()
    for module in (resume, cover_letter, resume_parsing):
        for template in module.TEMPLATES:
            registry.register(template)
        registry.register_builder(module.KIND, module.build_values, module.VALUE_KEYS)
    return registry
