"""YouTube helpers: video id parsing and caption transcripts."""

from __future__ import annotations

import logging
import re

from youtube_transcript_api import (
    NoTranscriptFound,
    YouTubeTranscriptApi,
)

logger = logging.getLogger(__name__)

_URL_PATTERNS = (
    re.compile(r"(?:youtube\.com/watch\?(?:.*&)?v=|youtu\.be/|youtube\.com/embed/|youtube\.com/v/|youtube\.com/shorts/)([a-zA-Z0-9_-]{11})"),
    re.compile(r"^([a-zA-Z0-9_-]{11})$"),
)

ENGLISH_CODES = ["en", "en-US", "en-GB", "en-IN", "en-AU", "en-CA"]
MIN_TRANSCRIPT_CHARS = 50


def extract_video_id(url: str) -> str | None:
    url = (url or "").strip()
    for pattern in _URL_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def thumbnail_url(video_id: str) -> str:
    return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"


def fetch_transcript(video_id: str) -> str:
    """English captions when present, else the first available track. Empty string on any failure."""
    api = YouTubeTranscriptApi()
    try:
        listing = api.list(video_id)
        try:
            transcript = listing.find_transcript(ENGLISH_CODES)
        except NoTranscriptFound:
            transcript = next(iter(listing))
        snippets = transcript.fetch()
    except Exception as exc:
        logger.warning("[YouTube] Caption extraction failed for %s: %s", video_id, exc)
        return ""
    return " ".join(s.text.strip() for s in snippets if s.text.strip())


def placeholder_transcript(video_id: str, url: str) -> str:
    return (
        f"[Video ID: {video_id}] - Unable to extract transcript. "
        f"Please generate educational content based on this video URL: {url}"
    )
