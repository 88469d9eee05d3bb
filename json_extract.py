"""Best-effort JSON extraction from free-text model replies."""

from __future__ import annotations

import json
import re
from typing import Any

_FENCE_MARKERS = re.compile(r"```(?:json)?\n?")
_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_GREEDY_JSON = re.compile(r"(\{[\s\S]*\}|\[[\s\S]*\])")
_GREEDY_ARRAY = re.compile(r"\[[\s\S]*\]")
_GREEDY_OBJECT = re.compile(r"\{[\s\S]*\}")


class JSONExtractionError(ValueError):
    """The reply holds no parseable JSON of the expected shape."""


def strip_code_fences(text: str) -> str:
    return _FENCE_MARKERS.sub("", text or "").strip()


def extract_json(text: str) -> Any | None:
    """Fenced block, else the greedy {...}/[...] span, else the whole text. None when nothing parses."""
    text = text or ""
    match = _FENCED_BLOCK.search(text) or _GREEDY_JSON.search(text)
    if match:
        try:
            return json.loads(match.group(1))
        except ValueError:
            pass
    try:
        return json.loads(text)
    except ValueError:
        return None


def _parse_with_fallback(text: str, pattern: re.Pattern, kind: str) -> Any:
    try:
        return json.loads(strip_code_fences(text))
    except ValueError:
        pass
    match = pattern.search(text or "")
    if not match:
        raise JSONExtractionError(f"No JSON {kind} found in model reply")
    try:
        return json.loads(match.group(0))
    except ValueError as exc:
        raise JSONExtractionError(f"Malformed JSON {kind} in model reply: {exc}") from exc


def parse_json_array(text: str) -> Any:
    """Whole reply minus fences, else the greedy [...] span."""
    return _parse_with_fallback(text, _GREEDY_ARRAY, "array")


def parse_json_object(text: str) -> Any:
    """Whole reply minus fences, else the greedy {...} span."""
    return _parse_with_fallback(text, _GREEDY_OBJECT, "object")


def extract_json_span(text: str) -> Any:
    """First '{' to last '}', falling back to first '[' to last ']'."""
    text = text or ""
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        try:
            return json.loads(text[start:end + 1])
        except ValueError:
            pass
    start, end = text.find("["), text.rfind("]")
    if start != -1 and end > start:
        try:
            return json.loads(text[start:end + 1])
        except ValueError as exc:
            raise JSONExtractionError(f"Failed to parse AI response as JSON: {exc}") from exc
    raise JSONExtractionError("Failed to parse AI response as JSON")
