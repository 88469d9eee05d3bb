"""
Structured logging configuration.

- JSON lines in production, readable text in development
- Short request id on every request for tracing
- One access-log line per API call
- Masked provider keys on startup
"""

from __future__ import annotations

import json
import logging
import time
import uuid

from flask import Flask, g, request

logger = logging.getLogger(__name__)


class JSONFormatter(logging.Formatter):
    """Emit log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = getattr(record, "request_id", None)
        if request_id:
            entry["request_id"] = request_id
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def mask_key(key: str) -> str:
    """`gsk_abcdef12` -> `gsk_...12`; empty -> `MISSING`."""
    if not key:
        return "MISSING"
    if len(key) <= 6:
        return "****"
    return f"{key[:4]}...{key[-2:]}"


def init_logging(app: Flask) -> None:
    """Configure root logging from app config and install request hooks."""
    log_format = app.config.get("LOG_FORMAT", "text")
    log_level = app.config.get("LOG_LEVEL", "INFO")

    root = logging.getLogger()
    root.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
    root.addHandler(handler)

    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    @app.before_request
    def _attach_request_id():
        g.request_id = uuid.uuid4().hex[:12]
        g.request_start = time.time()

    @app.after_request
    def _log_request(response):
        if not request.path.startswith("/api"):
            return response
        duration_ms = (time.time() - getattr(g, "request_start", time.time())) * 1000
        app.logger.info(
            "%s %s %s %.0fms",
            request.method,
            request.path,
            response.status_code,
            duration_ms,
            extra={"request_id": getattr(g, "request_id", "-")},
        )
        return response


def log_provider_status(app: Flask) -> None:
    logger.info("Environment: %s", "testing" if app.testing else ("development" if app.debug else "production"))
    logger.info("[AI Status] Groq key: %s", mask_key(app.config.get("GROQ_API_KEY", "")))
    logger.info("[AI Status] Gemini key: %s", mask_key(app.config.get("GEMINI_API_KEY", "")))
