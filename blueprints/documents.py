"""Study document analysis."""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify

from ai_resilience import ProviderError
from helpers import error_response, get_llm, json_body
from json_extract import extract_json
from prompts import document_analysis_prompt
from study_models import document_fallback

logger = logging.getLogger(__name__)

bp = Blueprint("documents", __name__)


@bp.route("/api/documents", methods=["POST"])
def api_documents():
    data = json_body()
    content = data.get("content")
    if not content or not isinstance(content, str):
        return error_response("No content provided", 400)

    try:
        result = get_llm().complete(document_analysis_prompt(content), temperature=0.6, max_tokens=3000)
    except ProviderError as exc:
        logger.error("Documents API error: %s", exc)
        return error_response("Failed to analyze document", 500)

    parsed = extract_json(result.text)
    if parsed:
        return jsonify(parsed)
    return jsonify(document_fallback(result.text))
