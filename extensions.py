"""
Shared extension objects: the rate limiter and the per-app LLM client.
"""

from __future__ import annotations

from flask import current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Storage comes from RATELIMIT_STORAGE_URI; API_RATE_LIMIT is applied per blueprint
limiter = Limiter(key_func=get_remote_address)


class ClientManager:
    """Lazily builds one LLMClient per app and keeps it in app.extensions."""

    KEY = "llm_client"

    @classmethod
    def get_llm(cls):
        client = current_app.extensions.get(cls.KEY)
        if client is None:
            from llm_client import LLMClient
            client = LLMClient.from_config(current_app.config)
            current_app.extensions[cls.KEY] = client
        return client
