"""Prompt templates for cover letter generation."""

from __future__ import annotations

from resume_forge.models.document import DocumentKind
from resume_forge.models.payload import CoverLetterPayload
from resume_forge.prompts.registry import PromptTemplate, find_placeholders
from resume_forge.prompts.schemas import COVER_LETTER_SCHEMA

KIND = DocumentKind.COVER_LETTER
VALUE_KEYS = frozenset({
    "tone",
    "tone_guidance",
    "job_title",
    "company",
    "resume_id",
    "resume_highlights",
    "job_description",
})

TONE_GUIDANCE = {
    "professional": "formal, concise, and business-appropriate",
    "enthusiastic": "warm and energetic, showing genuine excitement while staying professional",
    "executive": "assertive, strategic, and achievement-focused, written for senior leadership roles",
}

_BODY = """\
Write a {tone} cover letter for the {job_title} role at {company}.
Tone: {tone_guidance}.
Incorporate achievements from resume {resume_id} and respond directly to the job description.

[RESUME HIGHLIGHTS]
{resume_highlights}

[JOB DESCRIPTION]
{job_description}

[OUTPUT]
Return only a JSON object with exactly this structure:
{output_format}

Rules:
- "body" is an array of 2-4 paragraphs.
- Do not invent achievements that are not in the resume highlights.
- Never omit a key; use an empty string or empty array if needed."""

STANDARD_TEXT = (
    """\
[SYSTEM]
You are an expert career writer outputting JSON.

[TASK]
"""
    + _BODY
)

REPAIR_TEXT = (
    """\
[SYSTEM]
You are an expert career writer outputting JSON.
The job description and resume highlights may have been scraped or OCR-extracted and can contain
broken words, stray characters, repeated navigation text or merged lines. Ignore the noise and
correct obvious character errors (0/O, 1/l, rn/m) before writing.

[TASK]
"""
    + _BODY
)

TEMPLATES = (
    PromptTemplate(
        kind=KIND,
        version="1.0",
        model_hint="quality",
        temperature=0.8,
        max_tokens=2048,
        template_text=STANDARD_TEXT,
        placeholders=find_placeholders(STANDARD_TEXT),
        target_schema=COVER_LETTER_SCHEMA,
    ),
    PromptTemplate(
        kind=KIND,
        version="1.1",
        model_hint="quality",
        temperature=0.6,
        max_tokens=2048,
        template_text=REPAIR_TEXT,
        placeholders=find_placeholders(REPAIR_TEXT),
        target_schema=COVER_LETTER_SCHEMA,
        repair_variant=True,
    ),
)


def build_values(payload: CoverLetterPayload) -> dict[str, str]:
    return {
        "tone": payload.tone,
        "tone_guidance": TONE_GUIDANCE[payload.tone],
        "job_title": payload.job_title,
        "company": payload.company,
        "resume_id": payload.resume_id,
        "resume_highlights": payload.resume_highlights or "N/A",
        "job_description": payload.job_description,
    }
