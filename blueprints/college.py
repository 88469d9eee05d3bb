"""College and career guidance."""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify

from ai_resilience import ProviderError
from helpers import error_response, get_llm, json_body
from json_extract import JSONExtractionError, parse_json_object
from prompts import COLLEGE_PROMPTS

logger = logging.getLogger(__name__)

bp = Blueprint("college", __name__)


@bp.route("/api/college", methods=["POST"])
def api_college():
    data = json_body()
    mode = data.get("mode")
    build_prompt = COLLEGE_PROMPTS.get(mode) if isinstance(mode, str) else None
    if build_prompt is None:
        return error_response("Invalid mode", 400)

    params = {k: v for k, v in data.items() if k != "mode"}
    try:
        result = get_llm().complete(build_prompt(params), temperature=0.7, max_tokens=4096)
    except ProviderError as exc:
        logger.error("[College API Error]: %s", exc)
        return error_response("Failed to process request", 500)

    if mode == "chat":
        return jsonify({"reply": result.text})

    try:
        parsed = parse_json_object(result.text)
    except JSONExtractionError:
        return error_response("Failed to parse response", 500)
    return jsonify(parsed)
