"""
Test fixtures for the study companion API.

Provides app and client fixtures on the testing config, and a fake LLM
client injected into app.extensions so no test reaches a real provider.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture(autouse=True)
def reset_resilience_state():
    """Circuit breaker and cache are module singletons; start each test clean."""
    from ai_resilience import get_cache, get_circuit_breaker

    get_circuit_breaker().reset()
    get_cache().clear()
    yield
    get_circuit_breaker().reset()
    get_cache().clear()


@pytest.fixture
def app():
    from app import create_app

    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret-key",
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


def make_result(text: str, provider: str = "groq", model: str = "llama-3.3-70b-versatile"):
    from llm_client import LLMResult
    return LLMResult(text=text, provider=provider, model=model, metadata={"cache_hit": False})


@pytest.fixture
def fake_llm(app):
    """MagicMock LLMClient; set `.reply` to control what every call returns."""
    llm = MagicMock()

    def _reply(text: str, provider: str = "groq", model: str = "llama-3.3-70b-versatile"):
        result = make_result(text, provider, model)
        for method in (llm.chat, llm.complete, llm.groq, llm.gemini, llm.vision):
            method.return_value = result
            method.side_effect = None
        return result

    def _fail(exc: Exception):
        for method in (llm.chat, llm.complete, llm.groq, llm.gemini, llm.vision):
            method.side_effect = exc

    llm.reply = _reply
    llm.fail = _fail
    llm.reply("{}")
    llm.status.return_value = {
        "groq": {"configured": True, "circuit": "closed", "models": ["llama-3.3-70b-versatile"]},
        "gemini": {"configured": True, "circuit": "closed", "models": ["gemini-2.0-flash"]},
    }
    app.extensions["llm_client"] = llm
    return llm
