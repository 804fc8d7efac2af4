"""Tests for prompt templates and the registry."""

from __future__ import annotations

import pytest

from resume_forge.errors import PromptTemplateError
from resume_forge.models.document import DocumentKind
from resume_forge.models.payload import ParsePayload, ResumePayload
from resume_forge.prompts.registry import (
    PromptRegistry,
    PromptTemplate,
    default_registry,
    find_placeholders,
)
from resume_forge.prompts.schemas import COVER_LETTER_SCHEMA, RESUME_SCHEMA


def _template(text: str, placeholders: set[str], kind=DocumentKind.RESUME, schema=RESUME_SCHEMA, repair=False):
    return PromptTemplate(
        kind=kind,
        version="9.9",
        model_hint="fast",
        temperature=0.1,
        max_tokens=100,
        template_text=text,
        placeholders=frozenset(placeholders),
        target_schema=schema,
        repair_variant=repair,
    )


class TestFindPlaceholders:
    def test_finds_names(self):
        assert find_placeholders("Hi {name}, see {output_format}") == {"name", "output_format"}

    def test_escaped_braces_ignored(self):
        assert find_placeholders("literal {{braces}} and {real}") == {"real"}

    def test_format_spec_rejected(self):
        with pytest.raises(PromptTemplateError):
            find_placeholders("{value:>10}")


class TestPromptTemplate:
    def test_render_substitutes_everything(self):
        tmpl = _template("Title: {title}\n{output_format}", {"title", "output_format"})
        rendered = tmpl.render({"title": "Engineer"})

        assert rendered.startswith("Title: Engineer\n")
        assert '"summary"' in rendered
        assert "{" in rendered  # schema skeleton is JSON

    def test_missing_value_raises(self):
        tmpl = _template("{title} {summary}", {"title", "summary"})
        with pytest.raises(PromptTemplateError, match="summary"):
            tmpl.render({"title": "x"})

    def test_extra_values_ignored(self):
        tmpl = _template("{title}", {"title"})
        assert tmpl.render({"title": "x", "unused": "y"}) == "x"

    def test_braces_in_values_kept_verbatim(self):
        tmpl = _template("{title}", {"title"})
        assert tmpl.render({"title": "{not a placeholder}"}) == "{not a placeholder}"


class TestPromptRegistry:
    def test_register_rejects_undeclared_placeholder(self):
        registry = PromptRegistry()
        with pytest.raises(PromptTemplateError, match="declared placeholders"):
            registry.register(_template("{title} {summary}", {"title"}))

    def test_register_rejects_unused_declaration(self):
        registry = PromptRegistry()
        with pytest.raises(PromptTemplateError):
            registry.register(_template("{title}", {"title", "summary"}))

    def test_register_rejects_schema_mismatch(self):
        registry = PromptRegistry()
        with pytest.raises(PromptTemplateError, match="schema"):
            registry.register(_template("{title}", {"title"}, schema=COVER_LETTER_SCHEMA))

    def test_register_rejects_duplicate(self):
        registry = PromptRegistry()
        registry.register(_template("{title}", {"title"}))
        with pytest.raises(PromptTemplateError, match="Duplicate"):
            registry.register(_template("{title}", {"title"}))

    def test_get_unknown_raises_lookup_error(self):
        with pytest.raises(LookupError):
            PromptRegistry().get(DocumentKind.RESUME)

    def test_build_prompt_without_builder(self):
        registry = PromptRegistry()
        tmpl = _template("{title}", {"title"})
        registry.register(tmpl)
        with pytest.raises(PromptTemplateError, match="value builder"):
            registry.build_prompt(tmpl, ResumePayload(title="x"))


    def test_builder_missing_a_placeholder_rejected(self):
        registry = PromptRegistry()
        registry.register(_template("{title} {summary}\n{output_format}", {"title", "summary", "output_format"}))
        with pytest.raises(PromptTemplateError, match="summary"):
            registry.register_builder(DocumentKind.RESUME, lambda p: {"title": p.title}, frozenset({"title"}))

    def test_template_registered_after_builder_checked(self):
        registry = PromptRegistry()
        registry.register_builder(DocumentKind.RESUME, lambda p: {"title": p.title}, frozenset({"title"}))
        registry.register(_template("{title}\n{output_format}", {"title", "output_format"}))
        with pytest.raises(PromptTemplateError, match="value builder does not supply"):
            registry.register(_template("{title} {summary}", {"title", "summary"}, repair=True))

    def test_builder_covering_placeholders_accepted(self):
        registry = PromptRegistry()
        tmpl = _template("{title}\n{output_format}", {"title", "output_format"})
        registry.register(tmpl)
        registry.register_builder(DocumentKind.RESUME, lambda p: {"title": p.title}, frozenset({"title"}))
        assert registry.build_prompt(tmpl, ResumePayload(title="Engineer")).startswith("Engineer\n")


class TestDefaultRegistry:
    def test_two_variants_per_kind(self):
        registry = default_registry()
        for kind in DocumentKind:
            standard = registry.get(kind)
            repair = registry.get(kind, use_repair_variant=True)
            assert standard.repair_variant is False
            assert repair.repair_variant is True
            assert standard.target_schema.kind is kind
        assert len(registry.templates()) == 6

    def test_parsing_versions_and_parameters(self):
        registry = default_registry()
        standard = registry.get(DocumentKind.PARSED_RESUME)
        ocr = registry.get(DocumentKind.PARSED_RESUME, use_repair_variant=True)

        assert (standard.version, ocr.version) == ("2.0", "2.1")
        assert standard.temperature == ocr.temperature == 0.3
        assert standard.max_tokens == 4096
        assert standard.model_hint == "fast"
        assert "OCR" in ocr.template_text

    def test_resume_prompt_includes_payload(self, resume_payload):
        registry = default_registry()
        prompt = registry.build_prompt(registry.get(DocumentKind.RESUME), resume_payload)

        assert "Target title: Staff Engineer" in prompt
        assert "- Senior Engineer at Acme (2019-03 - Present): Cut p99 latency by 40%" in prompt
        assert "Python, Kubernetes" in prompt
        assert "Contact: N/A" in prompt
        assert '"keywords"' in prompt

    def test_cover_letter_prompt_uses_tone(self, cover_letter_payload):
        registry = default_registry()
        prompt = registry.build_prompt(registry.get(DocumentKind.COVER_LETTER), cover_letter_payload)

        assert "enthusiastic cover letter for the Staff Engineer role at Globex" in prompt
        assert "warm and energetic" in prompt
        assert "res-123" in prompt
        assert "Own the reliability of our payment rails." in prompt

    def test_parsing_prompt_cleans_text(self):
        registry = default_registry()
        payload = ParsePayload(extracted_text="Jane\u200b Doe\n\n\n\n● Python    Go")
        prompt = registry.build_prompt(registry.get(DocumentKind.PARSED_RESUME), payload)

        assert "Jane Doe\n\n- Python Go" in prompt
        assert "\u200b" not in prompt
        assert '"personalInfo"' in prompt


class TestValueBuilders:
    def test_declared_keys_match_built_values(self, resume_payload, cover_letter_payload):
        from resume_forge.prompts import cover_letter, resume, resume_parsing

        payloads = [
            (resume, resume_payload),
            (cover_letter, cover_letter_payload),
            (resume_parsing, ParsePayload(extracted_text="Jane Doe")),
        ]
        for module, payload in payloads:
            assert set(module.build_values(payload)) == module.VALUE_KEYS

    def test_default_registry_fails_when_builder_misses_a_key(self, monkeypatch):
        from resume_forge.prompts import cover_letter

        monkeypatch.setattr(cover_letter, "VALUE_KEYS", cover_letter.VALUE_KEYS - {"tone"})
        with pytest.raises(PromptTemplateError, match="tone"):
            default_registry()
