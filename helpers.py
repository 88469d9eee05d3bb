"""
Shared helpers used across blueprints.
"""

from __future__ import annotations

from typing import Any

from flask import jsonify, request

from extensions import ClientManager


class BadRequest(Exception):
    """Raised by handlers for client errors; rendered as a 400 JSON body."""

    def __init__(self, error: str, **extra: Any) -> None:
        super().__init__(error)
        self.error = error
        self.extra = extra


def json_body() -> dict[str, Any]:
    """The request's JSON object, or {} for an empty body. Non-object JSON is a 400."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data


def text_field(data: dict[str, Any], key: str, default: str = "") -> str:
    """Optional string field. Missing, null or empty gives `default`; any other type is a 400."""
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise BadRequest(f"{key} must be a string")
    return value or default


def error_response(error: str, status: int, **extra: Any):
    return jsonify({"error": error, **extra}), status


def get_llm():
    return ClientManager.get_llm()


def as_int(value: Any, default: int, low: int = 1, high: int = 100) -> int:
    """Clamp a client-supplied count; garbage becomes the default."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return max(low, min(high, number))
