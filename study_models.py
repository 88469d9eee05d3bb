"""
Response shaping for generated study material.

Model output is loosely structured JSON; these helpers fill in the fields the
front end relies on (ids, marks, spaced-repetition state) and hold the canned
payloads returned when a reply cannot be used.
"""

from __future__ import annotations

import random
from collections import Counter
from datetime import datetime, timezone
from typing import Any

# SM-2 starting state for a card that has never been reviewed.
SM2_INITIAL_INTERVAL = 1  # days
SM2_INITIAL_EASE = 2.5
SM2_INITIAL_REPETITIONS = 0

HIGH_DEMAND_REPLY = "I'm currently experiencing high demand. Please try again in a moment."

FALLBACK_PODCAST_SCRIPT = [
    {"speaker": "Alex", "text": "Hey everyone, welcome back! Today's topic is really exciting."},
    {"speaker": "Sam", "text": "It really is. Let me break it down for you."},
]

_GATING_PHRASES = ("think about", "what do you think", "try to", "consider")


def _iso_now(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.isoformat().replace("+00:00", "Z")


# ── Flashcards ──────────────────────────────────────────────

def new_flashcard(raw: dict[str, Any], index: int, now: datetime | None = None) -> dict[str, Any]:
    """A generated card with fresh SM-2 state. The model may name the id; everything SM-2 is reset."""
    now = now or datetime.now(timezone.utc)
    card = {"id": f"fc_{int(now.timestamp() * 1000)}_{index}"}
    card.update(raw)
    card.update({
        "interval": SM2_INITIAL_INTERVAL,
        "easeFactor": SM2_INITIAL_EASE,
        "repetitions": SM2_INITIAL_REPETITIONS,
        "nextReview": _iso_now(now),
        "status": "new",
    })
    return card


def new_flashcards(raw_cards: list[Any], now: datetime | None = None) -> list[dict[str, Any]]:
    now = now or datetime.now(timezone.utc)
    return [new_flashcard(c, i, now) for i, c in enumerate(raw_cards) if isinstance(c, dict)]


# ── Quiz ────────────────────────────────────────────────────

def normalize_questions(raw: list[Any], subject: str) -> list[dict[str, Any]]:
    questions = []
    for i, q in enumerate(q for q in raw if isinstance(q, dict)):
        questions.append({
            **q,
            "id": q.get("id") or f"q{i + 1}",
            "marks": q.get("marks") or 1,
            "subject": q.get("subject") or subject,
        })
    return questions


def quiz_metadata(questions: list[dict[str, Any]], req: dict[str, Any]) -> dict[str, Any]:
    topics = Counter(q.get("topic") or "General" for q in questions)
    total_marks = 0
    for q in questions:
        try:
            total_marks += float(q.get("marks") or 1)
        except (TypeError, ValueError):
            total_marks += 1
    return {
        "totalQuestions": len(questions),
        "totalMarks": int(total_marks) if float(total_marks).is_integer() else total_marks,
        "difficulty": req.get("difficulty"),
        "topicDistribution": dict(topics),
        "board": req.get("board"),
        "subject": req.get("subject"),
    }


# ── Chat ────────────────────────────────────────────────────

def is_concept_gated(text: str) -> bool:
    """True when the tutor answered with a leading question instead of the answer."""
    lowered = text.lower()
    return any(p in lowered for p in _GATING_PHRASES) or "?" in text


def confidence_score() -> float:
    return 0.85 + random.random() * 0.15


# ── Fallback payloads ───────────────────────────────────────

def document_fallback(raw_reply: str) -> dict[str, Any]:
    return {
        "summary": raw_reply,
        "keyPoints": ["Analysis complete — see summary above"],
        "questions": [
            {"question": "What is the main idea of this document?", "answer": "Refer to the summary for details."}
        ],
    }


def concept_gate_fallback(raw_reply: str) -> dict[str, Any]:
    return {
        "conceptArea": "",
        "hint": raw_reply,
        "microQuiz": "",
        "confidenceScore": 0.5,
        "citations": [],
    }
