"""
Legacy /api/ai/* routes kept for older front-end builds.

Raw provider pass-throughs, the short podcast generator, sample paper
generation with the vision model, text-to-speech, and the
retrieval-grounded study helpers.
"""

from __future__ import annotations

import json
import logging
import re
import time

from flask import Blueprint, current_app, jsonify

from ai_resilience import ProviderError
from helpers import as_int, error_response, get_llm, json_body, text_field
from json_extract import JSONExtractionError, extract_json, extract_json_span, strip_code_fences
from prompts import (
    concept_gate_prompt,
    rag_quiz_prompt,
    remedial_prompt,
    sample_paper_content,
    short_podcast_prompt,
)
from rag_engine import retrieve_context
from study_models import concept_gate_fallback
from tts import TTSError, synthesize
from validation import validate_chat_request
from youtube import MIN_TRANSCRIPT_CHARS, extract_video_id, fetch_transcript

logger = logging.getLogger(__name__)

bp = Blueprint("ai", __name__, url_prefix="/api/ai")

_SCRIPT_ARRAY = re.compile(r"\[\s*\{.*\}\s*\]", re.DOTALL)

NO_TRANSCRIPT_MESSAGE = (
    "Transcript not available. You can still analyze the video by providing "
    "context or asking questions about the topic."
)


# ── Raw provider pass-throughs ───────────────────────────────

@bp.route("/groq", methods=["POST"])
def groq_chat():
    """OpenAI-style chat completion, Groq first with Gemini as fallback."""
    req = validate_chat_request(json_body())
    try:
        result = get_llm().chat(
            req["messages"],
            temperature=req.get("temperature", 0.7),
            max_tokens=req.get("max_tokens", 4096),
        )
    except ProviderError as exc:
        logger.error("[Chat Error] %s", exc)
        return error_response(
            "AI Service Error", 500,
            message=str(exc),
            details="Both Groq and Gemini fallback failed. Check server console.",
        )

    return jsonify({
        "id": f"chatcmpl-{int(time.time() * 1000)}",
        "object": "chat.completion",
        "created": int(time.time()),
        "model": result.model,
        "provider": result.provider,
        "choices": [{
            "index": 0,
            "message": {"role": "assistant", "content": result.text},
            "finish_reason": "stop",
        }],
    })


@bp.route("/gemini", methods=["POST"])
def gemini_chat():
    """Gemini only; the conversation is flattened into one prompt."""
    messages = json_body().get("messages")
    if not isinstance(messages, list) or not messages:
        return error_response("No messages provided", 400)

    prompt = "\n".join(
        f"{m.get('role')}: {m.get('content')}" for m in messages if isinstance(m, dict)
    )
    try:
        result = get_llm().gemini([{"role": "user", "content": prompt}])
    except ProviderError as exc:
        logger.error("[Gemini] Error: %s", exc)
        return error_response(str(exc), 500)

    return jsonify({
        "candidates": [{
            "content": {"role": "model", "parts": [{"text": result.text}]},
            "finishReason": "STOP",
        }],
        "modelVersion": result.model,
    })


# ── Podcast ──────────────────────────────────────────────────

def _script_from_reply(text: str):
    try:
        parsed = json.loads(strip_code_fences(text))
    except ValueError:
        match = _SCRIPT_ARRAY.search(strip_code_fences(text))
        if match:
            try:
                return json.loads(match.group(0))
            except ValueError:
                pass
        return [{"speaker": "Sam", "text": text}]

    if isinstance(parsed, dict) and "script" in parsed:
        return parsed["script"]
    return parsed


@bp.route("/podcast", methods=["POST"])
def podcast():
    data = json_body()
    syllabus = data.get("syllabus") if isinstance(data.get("syllabus"), dict) else {}
    if data.get("mode") == "syllabus":
        topic = syllabus.get("topic") or ""
    else:
        topic = text_field(data, "content")

    try:
        result = get_llm().complete(short_podcast_prompt(str(topic)))
    except ProviderError as exc:
        logger.error("[Podcast] Error: %s", exc)
        return error_response(str(exc), 500)

    return jsonify({"script": _script_from_reply(result.text), "provider": "atlas-hybrid"})


# ── YouTube transcript ───────────────────────────────────────

@bp.route("/youtube-transcript", methods=["POST"])
def youtube_transcript():
    data = json_body()
    video_id = text_field(data, "videoId") or extract_video_id(text_field(data, "videoUrl"))
    if not video_id:
        return error_response("videoId or videoUrl required", 400)

    transcript = fetch_transcript(video_id)
    if len(transcript) >= MIN_TRANSCRIPT_CHARS:
        return jsonify({
            "videoId": video_id,
            "title": "YouTube Video",
            "transcript": transcript,
            "noTranscript": False,
        })

    return jsonify({
        "videoId": video_id,
        "title": "YouTube Video",
        "transcript": None,
        "noTranscript": True,
        "message": NO_TRANSCRIPT_MESSAGE,
    })


# ── Sample paper (vision) ────────────────────────────────────

@bp.route("/generate-paper", methods=["POST"])
def generate_paper():
    data = json_body()
    extracted_text = text_field(data, "extractedText")
    images = data.get("images") if isinstance(data.get("images"), list) else []
    logger.info("[Paper Gen] Received request. Text len: %d, Images: %d", len(extracted_text), len(images))

    if not extracted_text and not images:
        return error_response("No content provided (text or images)", 400)

    messages = [{"role": "user", "content": sample_paper_content(extracted_text, images)}]
    try:
        result = get_llm().vision(messages)
    except ProviderError as exc:
        logger.error("[Paper Gen] Error: %s", exc)
        return error_response("Failed to generate paper", 500, details=str(exc))

    return jsonify({"success": True, "paper": result.text})


# ── Text to speech ───────────────────────────────────────────

@bp.route("/tts", methods=["POST"])
def text_to_speech():
    data = json_body()
    text = data.get("text")
    speaker = data.get("speaker")
    if not text or not isinstance(text, str):
        return error_response("Text is required", 400)
    if len(text) > current_app.config.get("TTS_MAX_CHARS", 5000):
        return error_response("Text too long for TTS chunk", 400)

    try:
        audio = synthesize(text, speaker)
    except TTSError as exc:
        logger.error("[TTS] Error: %s", exc)
        return error_response("TTS Generation Failed", 500)

    return jsonify({"audioData": audio, "speaker": speaker})


# ── Retrieval-grounded helpers ───────────────────────────────

@bp.route("/concept-gate", methods=["POST"])
def concept_gate():
    """Hint plus a micro-quiz instead of a direct answer."""
    data = json_body()
    question = data.get("question")
    if not question or not isinstance(question, str):
        return error_response("Question is required", 400)

    context = retrieve_context(question, text_field(data, "documentContent"))
    try:
        result = get_llm().complete(concept_gate_prompt(question, context))
    except ProviderError as exc:
        logger.error("[Concept Gate] Error: %s", exc)
        return error_response("Failed to process question", 500)

    parsed = extract_json(result.text)
    if isinstance(parsed, dict):
        return jsonify(parsed)
    return jsonify(concept_gate_fallback(result.text))


@bp.route("/rag-quiz", methods=["POST"])
def rag_quiz():
    data = json_body()
    document = text_field(data, "documentContent")
    if not document:
        return error_response("documentContent is required", 400)

    topic = text_field(data, "topic")
    difficulty = text_field(data, "difficulty", "medium")
    count = as_int(data.get("count"), 5, high=50)
    context = retrieve_context(topic, document) if topic else document

    try:
        result = get_llm().complete(rag_quiz_prompt(context, difficulty, count))
    except ProviderError as exc:
        logger.error("[RAG Quiz] Error: %s", exc)
        return error_response("Failed to generate quiz", 500)

    try:
        return jsonify(extract_json_span(result.text))
    except JSONExtractionError:
        return error_response("Failed to parse quiz", 500)


@bp.route("/remedial", methods=["POST"])
def remedial():
    data = json_body()
    results = data.get("results")
    if not isinstance(results, dict):
        return error_response("results are required", 400)

    try:
        result = get_llm().complete(remedial_prompt(results, text_field(data, "documentContent")))
    except ProviderError as exc:
        logger.error("[Remedial] Error: %s", exc)
        return error_response("Failed to generate remedial plan", 500)

    return jsonify({"report": result.text})
