"""YouTube video study analysis."""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify

from ai_resilience import ProviderError
from helpers import error_response, get_llm, json_body
from json_extract import JSONExtractionError, parse_json_object
from prompts import youtube_analysis_prompt
from youtube import (
    MIN_TRANSCRIPT_CHARS,
    extract_video_id,
    fetch_transcript,
    placeholder_transcript,
    thumbnail_url,
)

logger = logging.getLogger(__name__)

bp = Blueprint("video", __name__)

MAX_TRANSCRIPT_CHARS = 6000


@bp.route("/api/youtube", methods=["POST"])
def api_youtube():
    data = json_body()
    url = data.get("url")
    if not url or not isinstance(url, str):
        return error_response("YouTube URL required", 400)

    video_id = extract_video_id(url)
    if not video_id:
        return error_response("Invalid YouTube URL", 400)

    transcript = fetch_transcript(video_id)
    if len(transcript) < MIN_TRANSCRIPT_CHARS:
        transcript = placeholder_transcript(video_id, url)

    prompt = youtube_analysis_prompt(transcript[:MAX_TRANSCRIPT_CHARS])
    try:
        result = get_llm().complete(prompt, temperature=0.7, max_tokens=4096)
    except ProviderError as exc:
        logger.error("[YouTube API Error]: %s", exc)
        return error_response("Failed to process video", 500)

    try:
        analysis = parse_json_object(result.text)
    except JSONExtractionError:
        return error_response("Failed to parse AI response", 500)
    if not isinstance(analysis, dict):
        return error_response("Failed to parse AI response", 500)

    return jsonify({
        "videoId": video_id,
        "thumbnail": thumbnail_url(video_id),
        **analysis,
        "transcriptLength": len(transcript),
    })
