"""AI Resilience Layer: Retry, Circuit Breaker, Cache, Cost Tracking.

Provides resilient_llm_call(), the single-model entry point used by the
provider fallback chain in llm_client.py. Every call goes through a
per-provider circuit breaker, transport-level retries, an optional response
cache and cost/latency accounting. Provider failures are classified into the
ProviderError family so callers can decide whether to cascade.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
from dataclasses import dataclass

import google.generativeai as genai
import groq
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)


# ── Errors ──────────────────────────────────────────────────

class ProviderError(Exception):
    """A provider call failed. `status` is the HTTP status when known."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class RateLimitedError(ProviderError):
    """429 / 503: quota exhausted or provider overloaded."""


class ProviderAuthError(ProviderError):
    """401 / 403, or no API key configured."""


class ModelNotFoundError(ProviderError):
    """404: model retired or misspelled."""


class ProviderUnavailableError(ProviderError):
    """Circuit breaker is open for this provider."""


class TransientLLMError(Exception):
    """Wrapper for transient transport errors that should be retried."""


# ── TTL Cache ───────────────────────────────────────────────

class TTLCache:
    """In-memory dict with expiry timestamps, evicting the soonest-expiring entry at 1000 entries."""

    MAX_ENTRIES = 1000

    def __init__(self) -> None:
        self._store: dict[str, tuple[str, float]] = {}  # key -> (value, expires_at)
        self._lock = threading.Lock()

    @staticmethod
    def _make_key(prompt: str, system: str, model: str) -> str:
        raw = f"{prompt}|{system}|{model}"
        return hashlib.sha256(raw.encode()).hexdigest()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if time.time() > expires_at:
                del self._store[key]
                return None
            return value

    def set(self, key: str, value: str, ttl_seconds: int = 86400) -> None:
        with self._lock:
            if key not in self._store and len(self._store) >= self.MAX_ENTRIES:
                # Expired entries go first; evict only if still full
                if not self._remove_expired():
                    self._evict_oldest()
            self._store[key] = (value, time.time() + ttl_seconds)

    def _evict_oldest(self) -> None:
        if not self._store:
            return
        oldest_key = min(self._store, key=lambda k: self._store[k][1])
        del self._store[oldest_key]

    def _remove_expired(self) -> int:
        now = time.time()
        expired = [k for k, (_, exp) in self._store.items() if now > exp]
        for k in expired:
            del self._store[k]
        return len(expired)

    def cleanup(self) -> int:
        """Remove all expired entries. Returns count removed."""
        with self._lock:
            return self._remove_expired()

    def clear(self) -> None:
        with self._lock:
            self._store.clear()


# ── Circuit Breaker ─────────────────────────────────────────

@dataclass
class _ProviderState:
    failures: int = 0
    state: str = "closed"  # closed | open | half_open
    last_failure_time: float = 0.0


class CircuitBreaker:
    """Per-provider state machine: closed -> open -> half_open -> closed."""

    FAILURE_THRESHOLD = 3
    RECOVERY_TIMEOUT = 60  # seconds

    def __init__(self) -> None:
        self._providers: dict[str, _ProviderState] = {}
        self._lock = threading.Lock()

    def _get_state(self, provider: str) -> _ProviderState:
        if provider not in self._providers:
            self._providers[provider] = _ProviderState()
        return self._providers[provider]

    def record_success(self, provider: str) -> None:
        with self._lock:
            state = self._get_state(provider)
            state.failures = 0
            state.state = "closed"

    def record_failure(self, provider: str) -> None:
        with self._lock:
            state = self._get_state(provider)
            state.failures += 1
            state.last_failure_time = time.time()
            if state.failures >= self.FAILURE_THRESHOLD or state.state == "half_open":
                state.state = "open"

    def is_open(self, provider: str) -> bool:
        with self._lock:
            state = self._get_state(provider)
            if state.state == "closed":
                return False
            if state.state == "open":
                elapsed = time.time() - state.last_failure_time
                if elapsed >= self.RECOVERY_TIMEOUT:
                    state.state = "half_open"
                    return False  # allow one attempt
                return True
            return False

    def get_state(self, provider: str) -> str:
        with self._lock:
            return self._get_state(provider).state

    def reset(self) -> None:
        with self._lock:
            self._providers.clear()


_circuit_breaker = CircuitBreaker()
_cache = TTLCache()


# ── Cost Tracker ────────────────────────────────────────────

# Approximate pricing per 1M tokens (input + output averaged)
_MODEL_PRICING: dict[str, float] = {
    "llama-3.3-70b-versatile": 0.69,
    "llama-3.1-8b-instant": 0.065,
    "meta-llama/llama-4-scout-17b-16e-instruct": 0.2,
    "gemini-2.0-flash": 0.075,
    "gemini-1.5-flash": 0.075,
    "gemini-1.5-pro": 2.5,
}


class CostTracker:
    """Estimates tokens from character count and applies model-specific pricing."""

    @staticmethod
    def estimate_tokens(text: str) -> int:
        """Rough estimate: 1 token ~ 4 characters."""
        return max(1, len(text) // 4)

    @staticmethod
    def track_call(
        model: str,
        input_text: str,
        output_text: str,
        latency_ms: int,
    ) -> dict:
        input_tokens = CostTracker.estimate_tokens(input_text)
        output_tokens = CostTracker.estimate_tokens(output_text)
        total_tokens = input_tokens + output_tokens

        price_per_million = _MODEL_PRICING.get(model, 1.0)
        cost_usd = (total_tokens / 1_000_000) * price_per_million

        return {
            "input_tokens_est": input_tokens,
            "output_tokens_est": output_tokens,
            "total_tokens_est": total_tokens,
            "cost_estimate_usd": round(cost_usd, 6),
            "model": model,
            "latency_ms": latency_ms,
        }


# ── Error classification ────────────────────────────────────

_TRANSIENT_ERRORS = (
    ConnectionError,
    TimeoutError,
    groq.APIConnectionError,  # includes APITimeoutError
)


def _status_code(exc: BaseException) -> int | None:
    """HTTP status from a groq APIStatusError (`status_code`) or a google api_core error (`code`)."""
    for attr in ("status_code", "code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    return None


def _is_transient(exc: BaseException) -> bool:
    """Transport failures only; any HTTP status from the provider is final for this model."""
    return isinstance(exc, _TRANSIENT_ERRORS)


def classify_error(exc: BaseException, provider: str, model: str) -> ProviderError:
    """Map an SDK exception onto the ProviderError family."""
    if isinstance(exc, ProviderError):
        return exc
    if isinstance(exc, TransientLLMError) and exc.__cause__ is not None:
        exc = exc.__cause__
    status = _status_code(exc)
    message = f"{provider} {model} failed: {exc}"
    if status in (401, 403):
        return ProviderAuthError(message, status)
    if status in (429, 503):
        return RateLimitedError(message, status)
    if status == 404:
        return ModelNotFoundError(message, status)
    return ProviderError(message, status)


# ── Provider adapters ───────────────────────────────────────

def message_text(content) -> str:
    """Plain text of a message body; multimodal part lists keep their text parts."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "\n".join(
            part.get("text", "") for part in content
            if isinstance(part, dict) and part.get("type") == "text"
        )
    return str(content or "")


def _call_groq(model: str, api_key: str, system: str, messages: list[dict],
               temperature: float, max_tokens: int, timeout: int) -> str:
    client = groq.Groq(api_key=api_key, timeout=timeout, max_retries=0)
    groq_messages: list[dict] = []
    if system:
        groq_messages.append({"role": "system", "content": system})
    groq_messages.extend(messages)
    response = client.chat.completions.create(
        model=model,
        messages=groq_messages,
        temperature=temperature,
        max_tokens=max_tokens,
        stream=False,
    )
    return response.choices[0].message.content or ""


def _call_gemini(model: str, api_key: str, system: str, messages: list[dict],
                 temperature: float, max_tokens: int, timeout: int) -> str:
    genai.configure(api_key=api_key)

    system_parts = [system] if system else []
    contents = []
    for msg in messages:
        text = message_text(msg.get("content"))
        if msg.get("role") == "system":
            system_parts.append(text)
            continue
        role = "model" if msg.get("role") == "assistant" else "user"
        contents.append({"role": role, "parts": [text]})

    m = genai.GenerativeModel(
        model,
        system_instruction="\n\n".join(system_parts) or None,
    )
    response = m.generate_content(
        contents,
        generation_config=genai.GenerationConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
        ),
        request_options={"timeout": timeout},
    )
    return response.text


_ADAPTERS = {
    "groq": _call_groq,
    "gemini": _call_gemini,
}


def _do_call(provider: str, model: str, api_key: str, system: str, messages: list[dict],
             temperature: float, max_tokens: int, timeout: int) -> str:
    """Execute the actual LLM API call (no retry, no cache)."""
    adapter = _ADAPTERS.get(provider)
    if adapter is None:
        raise ValueError(f"Unknown provider: {provider}")
    return adapter(model, api_key, system, messages, temperature, max_tokens, timeout)


@retry(
    retry=retry_if_exception_type(TransientLLMError),
    wait=wait_exponential(multiplier=1, min=1, max=30),
    stop=stop_after_attempt(3),
    reraise=True,
)
def _call_with_retry(provider: str, model: str, api_key: str, system: str, messages: list[dict],
                     temperature: float, max_tokens: int, timeout: int) -> str:
    """Call LLM with tenacity retry on transient transport errors."""
    try:
        return _do_call(provider, model, api_key, system, messages, temperature, max_tokens, timeout)
    except Exception as exc:
        if _is_transient(exc):
            raise TransientLLMError(str(exc)) from exc
        raise


# ── Main entry point ────────────────────────────────────────

def resilient_llm_call(
    provider: str,
    model: str,
    api_key: str,
    prompt: str = "",
    system: str = "",
    messages: list[dict] | None = None,
    temperature: float = 0.7,
    max_tokens: int = 4096,
    timeout: int = 30,
    cache_ttl: int = 0,
) -> tuple[str, dict]:
    """Call one model of one provider.

    Args:
        provider: 'groq' or 'gemini'
        model: Model name string
        api_key: Provider API key
        prompt: Single-turn prompt (used when `messages` is empty)
        system: System prompt (optional)
        messages: Chat messages for multi-turn (optional)
        cache_ttl: Cache TTL in seconds (0 = no caching)

    Returns:
        (response_text, metadata_dict) where metadata includes tokens, cost,
        latency, cache_hit, provider, model.

    Raises:
        ProviderError (or a subclass) on any failure.
    """
    if _circuit_breaker.is_open(provider):
        raise ProviderUnavailableError(f"Circuit breaker open for provider: {provider}")

    msgs = messages or [{"role": "user", "content": prompt}]
    cache_key = TTLCache._make_key(json.dumps(msgs, sort_keys=True, default=str), system, model)
    if cache_ttl > 0:
        cached = _cache.get(cache_key)
        if cached is not None:
            return cached, {
                "cache_hit": True,
                "provider": provider,
                "model": model,
                "input_tokens_est": 0,
                "output_tokens_est": 0,
                "cost_estimate_usd": 0.0,
                "latency_ms": 0,
            }

    start = time.time()
    try:
        response_text = _call_with_retry(
            provider, model, api_key, system, msgs, temperature, max_tokens, timeout,
        )
    except Exception as exc:
        error = classify_error(exc, provider, model)
        if not isinstance(error, ModelNotFoundError):
            _circuit_breaker.record_failure(provider)
        raise error from exc

    latency_ms = int((time.time() - start) * 1000)
    _circuit_breaker.record_success(provider)

    if cache_ttl > 0:
        _cache.set(cache_key, response_text, cache_ttl)

    input_text = system + "".join(message_text(m.get("content")) for m in msgs)
    metrics = CostTracker.track_call(model, input_text, response_text, latency_ms)
    metrics["cache_hit"] = False
    metrics["provider"] = provider
    logger.debug("%s %s answered in %dms", provider, model, latency_ms)

    return response_text, metrics


def get_circuit_breaker() -> CircuitBreaker:
    """Access the module-level circuit breaker singleton."""
    return _circuit_breaker


def get_cache() -> TTLCache:
    """Access the module-level TTLCache singleton."""
    return _cache
