# permit_intel/domain/json_extract.py
from __future__ import annotations

import json
from typing import Any

from .errors import AssistantResponseError


def find_first_json_span(text: str) -> str | None:
    """
    Return the first balanced `{...}` substring of `text`, or None.

    Braces inside JSON string literals (including escaped quotes) are ignored.
    An opening brace that is never closed yields None.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]

    # truncated: the first object never closes
    return None


def extract_first_json_object(text: str | None) -> dict[str, Any]:
    """Parse the first balanced JSON object out of free-form model output."""
    if not text:
        raise AssistantResponseError("Could not parse assistant response: empty reply")

    span = find_first_json_span(text)
    if span is None:
        raise AssistantResponseError("Could not parse assistant response: no JSON object found")

    try:
        parsed = json.loads(span)
    except json.JSONDecodeError as e:
        raise AssistantResponseError(f"Could not parse assistant response: {e.msg}") from e

    if not isinstance(parsed, dict):
        raise AssistantResponseError("Could not parse assistant response: expected a JSON object")
    return parsed
