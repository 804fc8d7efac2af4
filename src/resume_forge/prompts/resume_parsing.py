"""Prompt templates for extracting structured fields from resume text."""

from __future__ import annotations

from resume_forge.models.document import DocumentKind
from resume_forge.models.payload import ParsePayload
from resume_forge.prompts.registry import PromptTemplate, find_placeholders
from resume_forge.prompts.schemas import PARSED_RESUME_SCHEMA
from resume_forge.utils.text_cleaning import clean_extracted_text

KIND = DocumentKind.PARSED_RESUME
VALUE_KEYS = frozenset({"resume_text"})

STANDARD_TEXT = """\
[SYSTEM]
You are an expert resume parser with advanced text correction capabilities. Your expertise includes:
- Identifying and extracting personal information accurately
- Parsing employment history with proper date formatting
- Recognizing education credentials and institutions
- Extracting technical and soft skills

[TASK]
Parse the following resume text into a structured format. The text may contain formatting issues
or be poorly structured.

1. Extract all relevant information accurately
2. Correct obvious typos
3. Standardize date formats to YYYY-MM
4. Mark an entry as current when it is ongoing
5. Fill missing fields with empty strings or arrays as appropriate

[INPUT]
{resume_text}

[OUTPUT REQUIREMENTS]
Return a JSON object with exactly this structure:
{output_format}
All dates must be YYYY-MM or an empty string if unknown."""

OCR_TEXT = """\
[SYSTEM]
You are an expert resume parser specializing in OCR text correction and data extraction.
The text you receive has been extracted via OCR and likely contains errors.

[OCR ERROR PATTERNS]
Common OCR mistakes to correct:
- 0 (zero) vs O (letter O)
- 1 (one) vs l (lowercase L) vs I (uppercase i)
- rn vs m
- cl vs d
- 5 vs S
- 8 vs B
- Merged or split words
- Missing or extra spaces
- Scrambled special characters

[TASK]
1. Intelligently correct OCR errors based on context
2. Reconstruct proper formatting and structure
3. Extract all resume information accurately
4. Leave a field empty rather than guessing when the text is unreadable

[INPUT]
{resume_text}

[OUTPUT]
Return a JSON object with exactly this structure:
{output_format}
All dates must be YYYY-MM or an empty string if unknown."""

TEMPLATES = (
    PromptTemplate(
        kind=KIND,
        version="2.0",
        model_hint="fast",
        temperature=0.3,
        max_tokens=4096,
        template_text=STANDARD_TEXT,
        placeholders=find_placeholders(STANDARD_TEXT),
        target_schema=PARSED_RESUME_SCHEMA,
    ),
    PromptTemplate(
        kind=KIND,
        version="2.1",
        model_hint="fast",
        temperature=0.3,
        max_tokens=4096,
        template_text=OCR_TEXT,
        placeholders=find_placeholders(OCR_TEXT),
        target_schema=PARSED_RESUME_SCHEMA,
        repair_variant=True,
    ),
)


def build_values(payload: ParsePayload) -> dict[str, str]:
    return {"resume_text": clean_extracted_text(payload.extracted_text)}
