"""Request validation for the raw chat-completion endpoint."""

from __future__ import annotations

from typing import Any

ROLES = ("system", "user", "assistant")
MAX_CONTENT_CHARS = 100_000


class RequestValidationError(ValueError):
    def __init__(self, details: list[dict[str, str]]) -> None:
        super().__init__("; ".join(f"{d['path']}: {d['message']}" for d in details))
        self.details = details


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_range(body: dict, key: str, low: float, high: float, errors: list, integer: bool = False) -> None:
    if key not in body or body[key] is None:
        return
    value = body[key]
    if not _is_number(value) or (integer and int(value) != value):
        errors.append({"path": key, "message": f"Expected {'integer' if integer else 'number'}"})
    elif not low <= value <= high:
        errors.append({"path": key, "message": f"Must be between {low:g} and {high:g}"})


def validate_chat_request(body: Any) -> dict[str, Any]:
    """Return a sanitized copy of an OpenAI-style chat request, or raise RequestValidationError.

    Unknown keys are dropped. Message content is a non-empty string or a list
    of multimodal parts.
    """
    if not isinstance(body, dict):
        raise RequestValidationError([{"path": "", "message": "Expected object"}])

    errors: list[dict[str, str]] = []
    messages = body.get("messages")
    clean_messages: list[dict[str, Any]] = []

    if not isinstance(messages, list):
        errors.append({"path": "messages", "message": "Required array"})
    elif not messages:
        errors.append({"path": "messages", "message": "Array must contain at least 1 element(s)"})
    else:
        for i, msg in enumerate(messages):
            if not isinstance(msg, dict):
                errors.append({"path": f"messages.{i}", "message": "Expected object"})
                continue
            role = msg.get("role")
            content = msg.get("content")
            if role not in ROLES:
                errors.append({
                    "path": f"messages.{i}.role",
                    "message": f"Invalid enum value. Expected {' | '.join(ROLES)}",
                })
            if isinstance(content, str):
                if not 1 <= len(content) <= MAX_CONTENT_CHARS:
                    errors.append({
                        "path": f"messages.{i}.content",
                        "message": f"String must contain between 1 and {MAX_CONTENT_CHARS} character(s)",
                    })
            elif not isinstance(content, list):
                errors.append({"path": f"messages.{i}.content", "message": "Expected string or array"})
            clean_messages.append({"role": role, "content": content})

    if "model" in body and body["model"] is not None and not isinstance(body["model"], str):
        errors.append({"path": "model", "message": "Expected string"})
    _check_range(body, "temperature", 0, 2, errors)
    _check_range(body, "max_tokens", 1, 100_000, errors, integer=True)
    _check_range(body, "top_p", 0, 1, errors)

    if errors:
        raise RequestValidationError(errors)

    clean: dict[str, Any] = {"messages": clean_messages}
    for key in ("model", "temperature", "max_tokens", "top_p"):
        if body.get(key) is not None:
            clean[key] = body[key]
    return clean
