"""Two-host podcast script generation."""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify

from ai_resilience import ProviderError
from helpers import error_response, get_llm, json_body, text_field
from json_extract import extract_json
from prompts import podcast_prompt
from study_models import FALLBACK_PODCAST_SCRIPT

logger = logging.getLogger(__name__)

bp = Blueprint("podcast", __name__)


@bp.route("/api/podcast", methods=["POST"])
def api_podcast():
    data = json_body()
    syllabus = data.get("syllabus")
    prompt = podcast_prompt(
        text_field(data, "mode"),
        syllabus if isinstance(syllabus, dict) else None,
        text_field(data, "documentContent"),
    )

    try:
        result = get_llm().complete(prompt, temperature=0.85, max_tokens=4000)
    except ProviderError as exc:
        logger.error("Podcast API error: %s", exc)
        return error_response("Failed to generate podcast", 500)

    parsed = extract_json(result.text)
    if isinstance(parsed, dict) and parsed.get("script"):
        return jsonify(parsed)

    logger.info("Podcast reply had no script, using fallback")
    return jsonify({"script": [dict(line) for line in FALLBACK_PODCAST_SCRIPT]})
