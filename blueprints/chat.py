"""Tutor chat route."""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify

from ai_resilience import ProviderError, message_text
from helpers import error_response, get_llm, json_body, text_field
from prompts import TUTOR_SYSTEM_PROMPT, with_document_context
from study_models import HIGH_DEMAND_REPLY, confidence_score, is_concept_gated

logger = logging.getLogger(__name__)

bp = Blueprint("chat", __name__)


@bp.route("/api/chat", methods=["POST"])
def api_chat():
    data = json_body()
    messages = data.get("messages")
    if not isinstance(messages, list) or not messages:
        return error_response("No messages provided", 400)
    document_context = text_field(data, "documentContext")

    processed = [dict(m) for m in messages if isinstance(m, dict)]
    if not processed:
        return error_response("No messages provided", 400)
    if document_context:
        last = processed[-1]
        last["content"] = with_document_context(message_text(last.get("content")), document_context)

    try:
        result = get_llm().chat(processed, system=TUTOR_SYSTEM_PROMPT, temperature=0.7, max_tokens=2048)
    except ProviderError as exc:
        logger.error("Chat providers unavailable: %s", exc)
        return jsonify({
            "content": HIGH_DEMAND_REPLY,
            "error": "All AI providers unavailable",
        })

    content = result.text
    return jsonify({
        "content": content,
        "isConceptGated": is_concept_gated(content),
        "confidenceScore": confidence_score(),
        "citations": ["Uploaded document"] if document_context else [],
        "provider": result.provider,
    })
