from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from resume_forge.models.document import DocumentKind
from resume_forge.models.records import RenderedArtifact, ValidatedDocument

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

TEMPLATE_NAMES = {
    DocumentKind.RESUME: "resume.html",
    DocumentKind.COVER_LETTER: "cover_letter.html",
    DocumentKind.PARSED_RESUME: "parsed_resume.html",
}


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=True,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render(document: ValidatedDocument) -> RenderedArtifact:
    """Render a validated document to a standalone HTML page.

    Every field value is HTML-escaped. Output depends only on the document.
    """
    template = _environment().get_template(TEMPLATE_NAMES[document.kind])
    html = template.render(doc=document.fields, page_title=_page_title(document))
    logger.debug("Rendered %s (%d chars)", document.kind.value, len(html))
    return RenderedArtifact(html=html, source_document=document)


def _page_title(document: ValidatedDocument) -> str:
    if document.kind is DocumentKind.RESUME:
        return document.fields.title or "Resume"
    if document.kind is DocumentKind.COVER_LETTER:
        return "Cover Letter"
    return document.fields.full_name or "Parsed Resume"
