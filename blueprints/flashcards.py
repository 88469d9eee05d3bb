"""Flashcard generation route."""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify

from ai_resilience import ProviderError
from helpers import as_int, error_response, get_llm, json_body, text_field
from json_extract import JSONExtractionError, parse_json_array
from prompts import flashcard_prompt
from study_models import new_flashcards

logger = logging.getLogger(__name__)

bp = Blueprint("flashcards", __name__)

DEFAULT_CARD_COUNT = 15


@bp.route("/api/flashcards", methods=["POST"])
def api_flashcards():
    data = json_body()
    content = text_field(data, "content")
    topic = text_field(data, "topic")
    count = as_int(data.get("count"), DEFAULT_CARD_COUNT, high=50)

    if not content and not topic:
        return error_response("Content or topic required", 400)

    try:
        result = get_llm().complete(flashcard_prompt(content, topic, count), temperature=0.7, max_tokens=4096)
    except ProviderError as exc:
        logger.error("[Flashcard API Error]: %s", exc)
        return error_response("Failed to generate flashcards", 500)

    try:
        parsed = parse_json_array(result.text)
    except JSONExtractionError:
        return error_response("Failed to parse flashcards", 500)
    if isinstance(parsed, dict):
        parsed = parsed.get("flashcards")
    if not isinstance(parsed, list):
        return error_response("Failed to parse flashcards", 500)

    return jsonify({"flashcards": new_flashcards(parsed)})
