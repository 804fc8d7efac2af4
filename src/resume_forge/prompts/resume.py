"""Prompt templates for resume generation."""

from __future__ import annotations

from resume_forge.models.document import DocumentKind
from resume_forge.models.payload import ResumePayload
from resume_forge.prompts.registry import PromptTemplate, find_placeholders
from resume_forge.prompts.schemas import RESUME_SCHEMA

KIND = DocumentKind.RESUME
# Keys returned by build_values
VALUE_KEYS = frozenset({"title", "summary", "contact", "skills", "experience"})

_INPUT = """\
[CANDIDATE]
Target title: {title}
Summary: {summary}
Contact: {contact}
Skills: {skills}
Experience:
{experience}

[OUTPUT]
Return only a JSON object with exactly this structure:
{output_format}

Rules:
- "title" must be the target title exactly as given above.
- Only use facts present in the candidate data. Do not invent employers, dates or metrics.
- "sections" holds extra sections (projects, achievements) as heading + bullets.
- Use empty strings or empty arrays when there is nothing to say. Never omit a key."""

STANDARD_TEXT = (
    """\
[SYSTEM]
You are an elite executive talent copilot outputting JSON.

[TASK]
Craft an executive-grade, ATS-friendly resume for the candidate below.
Lead every experience highlight with an action verb and keep the impact measurable.

"""
    + _INPUT
)

REPAIR_TEXT = (
    """\
[SYSTEM]
You are an elite executive talent copilot outputting JSON.
The candidate data below was typed quickly or copied from another document and may contain typos,
broken words, merged lines or scrambled punctuation.

[TASK]
1. Correct obvious typos and formatting damage in the candidate data.
2. Keep names, employers and dates exactly as intended; do not guess missing facts.
3. Craft an executive-grade, ATS-friendly resume from the corrected data.

"""
    + _INPUT
)

TEMPLATES = (
    PromptTemplate(
        kind=KIND,
        version="1.0",
        model_hint="quality",
        temperature=0.7,
        max_tokens=4096,
        template_text=STANDARD_TEXT,
        placeholders=find_placeholders(STANDARD_TEXT),
        target_schema=RESUME_SCHEMA,
    ),
    PromptTemplate(
        kind=KIND,
        version="1.1",
        model_hint="quality",
        temperature=0.4,
        max_tokens=4096,
        template_text=REPAIR_TEXT,
        placeholders=find_placeholders(REPAIR_TEXT),
        target_schema=RESUME_SCHEMA,
        repair_variant=True,
    ),
)


def build_values(payload: ResumePayload) -> dict[str, str]:
    experience = "\n".join(
        f"- {exp.role} at {exp.company} ({exp.start or 'N/A'} - {exp.end or 'Present'}): {exp.impact}"
        for exp in payload.experience
    )
    contact = "N/A"
    if payload.contact is not None:
        parts = [
            payload.contact.full_name,
            payload.contact.email,
            payload.contact.phone,
            payload.contact.location,
            payload.contact.website,
        ]
        contact = " | ".join(p for p in parts if p) or "N/A"
    return {
        "title": payload.title,
        "summary": payload.summary or "N/A",
        "contact": contact,
        "skills": ", ".join(payload.skills) or "N/A",
        "experience": experience or "N/A",
    }
