"""Weekly study timetable generation."""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify

from ai_resilience import ProviderError
from helpers import error_response, get_llm, json_body, text_field
from json_extract import extract_json
from prompts import timetable_prompt

logger = logging.getLogger(__name__)

bp = Blueprint("timetable", __name__)


@bp.route("/api/timetable", methods=["POST"])
def api_timetable():
    data = json_body()
    prompt = timetable_prompt(
        text_field(data, "examDate"),
        data.get("weakTopics"),
        text_field(data, "energyLevel"),
    )

    try:
        result = get_llm().complete(prompt, temperature=0.6, max_tokens=4000)
    except ProviderError as exc:
        logger.error("Timetable API error: %s", exc)
        return error_response("Failed to generate timetable", 500)

    parsed = extract_json(result.text)
    if isinstance(parsed, dict) and parsed.get("timetable"):
        return jsonify(parsed)
    return jsonify({"timetable": []})
