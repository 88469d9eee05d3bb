"""Quiz generation route."""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify

from ai_resilience import ProviderError
from helpers import error_response, get_llm, json_body, text_field
from json_extract import JSONExtractionError, parse_json_array
from prompts import quiz_prompt
from study_models import normalize_questions, quiz_metadata

logger = logging.getLogger(__name__)

bp = Blueprint("quiz", __name__)

QUIZ_TEXT_FIELDS = ("subject", "board", "classLevel", "difficulty", "questionType", "content")


@bp.route("/api/quiz", methods=["POST"])
def api_quiz():
    data = json_body()
    if not data.get("subject") or not data.get("questionCount"):
        return error_response("Subject and question count required", 400)
    for key in QUIZ_TEXT_FIELDS:
        text_field(data, key)

    try:
        result = get_llm().complete(quiz_prompt(data), temperature=0.7, max_tokens=4096)
    except ProviderError as exc:
        logger.error("[Quiz API Error]: %s", exc)
        return error_response("Failed to generate quiz", 500)

    try:
        parsed = parse_json_array(result.text)
    except JSONExtractionError as exc:
        logger.warning("Quiz reply was not JSON: %s", exc)
        return error_response("Failed to parse quiz questions", 500)

    # Some models wrap the array in an object
    if isinstance(parsed, dict):
        parsed = parsed.get("questions")
    if not isinstance(parsed, list):
        return error_response("Failed to parse quiz questions", 500)

    questions = normalize_questions(parsed, data["subject"])
    return jsonify({
        "questions": questions,
        "metadata": quiz_metadata(questions, data),
    })
