"""
Provider fallback chain: Groq first, Gemini second.

Each provider has an ordered model cascade. Groq stops cascading on an auth
error (every model shares the key); Gemini moves on after any failure. When
both providers are exhausted AllProvidersFailedError carries both causes so
handlers can decide between a canned reply and a 500.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ai_resilience import (
    ProviderAuthError,
    ProviderError,
    get_circuit_breaker,
    resilient_llm_call,
)

logger = logging.getLogger(__name__)


class AllProvidersFailedError(ProviderError):
    """Groq and Gemini both failed."""

    def __init__(self, groq_error: Exception, gemini_error: Exception) -> None:
        super().__init__(f"All AI providers failed (groq: {groq_error}; gemini: {gemini_error})")
        self.groq_error = groq_error
        self.gemini_error = gemini_error


@dataclass
class LLMResult:
    text: str
    provider: str
    model: str
    metadata: dict = field(default_factory=dict)


class LLMClient:
    """Talks to Groq and Gemini on behalf of every feature endpoint."""

    def __init__(
        self,
        groq_api_key: str = "",
        gemini_api_key: str = "",
        groq_models: list[str] | None = None,
        gemini_models: list[str] | None = None,
        vision_model: str = "",
        timeout: int = 30,
        cache_ttl: int = 0,
    ) -> None:
        self.groq_api_key = groq_api_key
        self.gemini_api_key = gemini_api_key
        self.groq_models = list(groq_models or [])
        self.gemini_models = list(gemini_models or [])
        self.vision_model = vision_model
        self.timeout = timeout
        self.cache_ttl = cache_ttl

    @classmethod
    def from_config(cls, config) -> "LLMClient":
        return cls(
            groq_api_key=config.get("GROQ_API_KEY", ""),
            gemini_api_key=config.get("GEMINI_API_KEY", ""),
            groq_models=config.get("GROQ_MODELS", []),
            gemini_models=config.get("GEMINI_MODELS", []),
            vision_model=config.get("GROQ_VISION_MODEL", ""),
            timeout=config.get("LLM_REQUEST_TIMEOUT", 30),
            cache_ttl=config.get("LLM_CACHE_TTL", 0),
        )

    # ── Single provider cascades ─────────────────────────────

    def groq(self, messages: list[dict], system: str = "", temperature: float = 0.7,
             max_tokens: int = 4096) -> LLMResult:
        if not self.groq_api_key:
            raise ProviderAuthError("GROQ_API_KEY is not configured")
        if not self.groq_models:
            raise ProviderError("No Groq models configured")

        last_error: ProviderError | None = None
        for model in self.groq_models:
            logger.info("[AI] Attempting Groq with model: %s", model)
            try:
                text, meta = resilient_llm_call(
                    "groq", model, self.groq_api_key,
                    system=system, messages=messages,
                    temperature=temperature, max_tokens=max_tokens,
                    timeout=self.timeout, cache_ttl=self.cache_ttl,
                )
            except ProviderAuthError:
                logger.error("[AI] Groq rejected the API key")
                raise
            except ProviderError as exc:
                logger.warning("[AI] Groq %s failed (%s), trying fallback...", model, exc.status or exc)
                last_error = exc
                continue
            logger.info("[AI] Groq %s success", model)
            return LLMResult(text=text, provider="groq", model=model, metadata=meta)

        raise last_error

    def gemini(self, messages: list[dict], system: str = "", temperature: float = 0.7,
               max_tokens: int = 4096) -> LLMResult:
        if not self.gemini_api_key:
            raise ProviderAuthError("GEMINI_API_KEY is not configured")

        for model in self.gemini_models:
            try:
                text, meta = resilient_llm_call(
                    "gemini", model, self.gemini_api_key,
                    system=system, messages=messages,
                    temperature=temperature, max_tokens=max_tokens,
                    timeout=self.timeout, cache_ttl=self.cache_ttl,
                )
            except ProviderError as exc:
                logger.warning("[AI] Gemini %s failed: %s", model, exc)
                continue
            return LLMResult(text=text, provider="gemini", model=model, metadata=meta)

        raise ProviderError("All Gemini models failed")

    # ── Fallback chain ───────────────────────────────────────

    def chat(self, messages: list[dict], system: str = "", temperature: float = 0.7,
             max_tokens: int = 4096) -> LLMResult:
        """Groq cascade, then Gemini cascade."""
        try:
            return self.groq(messages, system=system, temperature=temperature, max_tokens=max_tokens)
        except ProviderError as groq_error:
            logger.warning("[AI] Groq unavailable, using Gemini fallback: %s", groq_error)
            try:
                return self.gemini(messages, system=system, temperature=temperature, max_tokens=max_tokens)
            except ProviderError as gemini_error:
                raise AllProvidersFailedError(groq_error, gemini_error) from gemini_error

    def complete(self, prompt: str, system: str = "", temperature: float = 0.7,
                 max_tokens: int = 4096) -> LLMResult:
        return self.chat(
            [{"role": "user", "content": prompt}],
            system=system, temperature=temperature, max_tokens=max_tokens,
        )

    def vision(self, messages: list[dict], temperature: float = 0.5, max_tokens: int = 6000) -> LLMResult:
        """Image-bearing request; Groq vision model only."""
        if not self.groq_api_key:
            raise ProviderAuthError("GROQ_API_KEY is not configured")
        logger.info("[AI] Attempting Groq Vision with model: %s", self.vision_model)
        text, meta = resilient_llm_call(
            "groq", self.vision_model, self.groq_api_key,
            messages=messages, temperature=temperature, max_tokens=max_tokens,
            timeout=self.timeout,
        )
        return LLMResult(text=text, provider="groq", model=self.vision_model, metadata=meta)

    def status(self) -> dict:
        breaker = get_circuit_breaker()
        return {
            "groq": {
                "configured": bool(self.groq_api_key),
                "circuit": breaker.get_state("groq"),
                "models": self.groq_models,
            },
            "gemini": {
                "configured": bool(self.gemini_api_key),
                "circuit": breaker.get_state("gemini"),
                "models": self.gemini_models,
            },
        }
