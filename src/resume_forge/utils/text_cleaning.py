"""Normalization of extracted resume text before it is sent to a model."""

from __future__ import annotations

import re

_INVISIBLE_RE = re.compile(r"[\u200b\u200c\u200d\u00ad\u2060\ufeff]")
_BULLET_RE = re.compile(r"^(\s*)[●•◦◆■▪★○▸►]\s*", re.MULTILINE)
_STAR_BULLET_RE = re.compile(r"^(\s*)\*\s{2,}", re.MULTILINE)
_PAGE_BREAK_RE = re.compile(r"\n*-{3} Page Break -{3}\n*")


def clean_extracted_text(text: str) -> str:
    """Clean artifacts left by PDF text extraction or OCR.

    Handles: invisible unicode, inconsistent bullet glyphs, runs of
    spaces/tabs, OCR page-break markers and excessive blank lines.
    Meaningful characters are never altered; OCR misreads are left for the
    model's error-correction prompt.
    """
    text = _INVISIBLE_RE.sub("", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _PAGE_BREAK_RE.sub("\n\n", text)

    text = _BULLET_RE.sub(r"\1- ", text)
    text = _STAR_BULLET_RE.sub(r"\1- ", text)

    lines = []
    for line in text.split("\n"):
        stripped = line.lstrip()
        indent = line[: len(line) - len(stripped)].replace("\t", "    ")
        stripped = re.sub(r"[ \t]{2,}", " ", stripped).rstrip()
        lines.append(f"{indent}{stripped}" if stripped else "")
    text = "\n".join(lines)

    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def looks_scanned(text: str, threshold: int = 200) -> bool:
    """Heuristic: very little extractable text usually means a scanned document."""
    return len(text.strip()) < threshold
