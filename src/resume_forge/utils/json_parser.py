"""Lenient recovery of JSON from model output that failed a strict parse."""

from __future__ import annotations

import json
import re
from collections.abc import Iterator

_FENCE_RE = re.compile(r"```[a-zA-Z]*\s*\n?(.*?)\n?```", re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


def extract_json(text: str) -> dict | list:
    """Recover a JSON value from chatty or damaged model output.

    Candidates are tried in order:
    1. The whole text
    2. The contents of a fenced code block (```json ... ```)
    3. The span from the first '{' to the last '}'
    4. The span from the first '[' to the last ']'
    5. Each of the above with trailing commas removed
    6. A truncated object closed off at its last complete value

    Raises ValueError when nothing parses.
    """
    text = (text or "").strip()
    if not text:
        raise ValueError("Could not extract JSON from empty text")

    for candidate in _candidates(text):
        for variant in (candidate, _TRAILING_COMMA_RE.sub(r"\1", candidate)):
            try:
                return json.loads(variant)
            except json.JSONDecodeError:
                continue

    repaired = _close_truncated(text)
    if repaired is not None:
        return repaired

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")


def _candidates(text: str) -> Iterator[str]:
    yield text
    fenced = _FENCE_RE.search(text)
    if fenced:
        yield fenced.group(1).strip()
    for opener, closer in (("{", "}"), ("[", "]")):
        start = text.find(opener)
        end = text.rfind(closer)
        if start != -1 and end > start:
            yield text[start : end + 1]


def _close_truncated(text: str) -> dict | None:
    """Close an object cut off mid-stream (e.g. by a max_tokens limit).

    Scans from the first '{' tracking open containers outside of strings,
    remembers the last position where a value was complete, truncates
    there and appends the missing closers.
    """
    start = text.find("{")
    if start == -1:
        return None

    stack: list[str] = []
    in_string = False
    escaped = False
    last_complete = None  # (index, stack snapshot)
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
                last_complete = (i, tuple(stack))
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            stack.append("}" if ch == "{" else "]")
        elif ch in "}]":
            if not stack:
                break
            stack.pop()
            last_complete = (i, tuple(stack))
            if not stack:
                return None  # balanced, so not a truncation problem
        elif ch.isalnum():
            last_complete = (i, tuple(stack))

    if last_complete is None:
        return None

    end, open_stack = last_complete
    body = text[start : end + 1].rstrip().rstrip(",")
    # A dangling key without a value ("name": or "name") cannot be closed
    for cut in (body, body.rsplit(",", 1)[0]):
        try:
            result = json.loads(cut + "".join(reversed(open_stack)))
        except json.JSONDecodeError:
            continue
        if isinstance(result, dict):
            return result
    return None
