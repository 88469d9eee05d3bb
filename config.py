"""
Application configuration: environment-aware settings.

All environment variables are documented here. See .env.example for a template.
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).parent

# Project .env first, then the working directory's for anything still missing
load_dotenv(BASE_DIR / ".env")
load_dotenv()


def _env_list(name: str, default: str) -> list[str]:
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


DEV_ORIGINS = [
    "http://localhost:8080",
    "http://localhost:5173",
    "http://localhost:5174",
    "http://127.0.0.1:8080",
]


def production_origins() -> list[str]:
    """ALLOWED_ORIGINS as a list; unset means any http(s) origin is reflected."""
    return _env_list("ALLOWED_ORIGINS", "") or [r"https?://.*"]


class BaseConfig:
    # Core Flask
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-key-change-in-production")
    JSON_SORT_KEYS = False

    # Request body limit (documents and page images arrive inline)
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024  # 5 MB

    # AI provider keys
    GROQ_API_KEY = os.environ.get("GROQ_API_KEY", "").strip()
    GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "").strip()

    # Model cascades, tried in order
    GROQ_MODELS = _env_list("GROQ_MODELS", "llama-3.3-70b-versatile,llama-3.1-8b-instant")
    GEMINI_MODELS = _env_list("GEMINI_MODELS", "gemini-2.0-flash,gemini-1.5-flash,gemini-1.5-pro")
    GROQ_VISION_MODEL = os.environ.get(
        "GROQ_VISION_MODEL", "meta-llama/llama-4-scout-17b-16e-instruct"
    )
    LLM_REQUEST_TIMEOUT = int(os.environ.get("LLM_REQUEST_TIMEOUT", "30"))
    LLM_CACHE_TTL = int(os.environ.get("LLM_CACHE_TTL", "0"))

    # Speech synthesis
    TTS_MAX_CHARS = int(os.environ.get("TTS_MAX_CHARS", "5000"))

    # Built single-page front end (optional)
    FRONTEND_DIST = os.environ.get("FRONTEND_DIST", "")

    # CORS
    CORS_ORIGINS: list[str] | str = DEV_ORIGINS

    # Logging
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")  # "json" or "text"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Rate limiting (defaults to in-memory; set REDIS_URL for Redis-backed)
    REDIS_URL = os.environ.get("REDIS_URL", "")
    RATELIMIT_ENABLED = True
    API_RATE_LIMIT = os.environ.get("API_RATE_LIMIT", "100 per 15 minutes")
    RATELIMIT_STORAGE_URI = os.environ.get("REDIS_URL", "") or "memory://"
    RATELIMIT_HEADERS_ENABLED = True


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")


class ProductionConfig(BaseConfig):
    DEBUG = False
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "json")
    CORS_ORIGINS = production_origins()

    @classmethod
    def validate(cls):
        """Fail fast on missing or insecure configuration in production."""
        errors: list[str] = []

        if cls.SECRET_KEY in ("dev-key-change-in-production", ""):
            errors.append("SECRET_KEY must be set to a secure value in production.")

        if not cls.GROQ_API_KEY and not cls.GEMINI_API_KEY:
            warnings.warn("Neither GROQ_API_KEY nor GEMINI_API_KEY is set; AI features will be unavailable.")

        if errors:
            raise RuntimeError(
                "Production configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
            )


class TestingConfig(BaseConfig):
    TESTING = True
    RATELIMIT_ENABLED = False
    GROQ_API_KEY = "test-groq-key"
    GEMINI_API_KEY = "test-gemini-key"


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
