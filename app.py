"""
AUREM Study Companion: Flask API

Orchestration layer between the browser front end and the Groq / Gemini
LLM providers: tutor chat, quizzes, flashcards, podcasts, timetables,
document and video analysis, and college guidance.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from blueprints import register_blueprints
from extensions import limiter
from helpers import BadRequest
from validation import RequestValidationError

logger = logging.getLogger(__name__)


def create_app(test_config: dict[str, Any] | None = None) -> Flask:
    app = Flask(__name__)

    # Load config
    if test_config is not None:
        from config import TestingConfig
        app.config.from_object(TestingConfig)
        app.config.update(test_config)
    else:
        from config import config_by_name
        env = os.environ.get("FLASK_ENV", "development")
        cfg = config_by_name.get(env, config_by_name["development"])
        app.config.from_object(cfg)
        if hasattr(cfg, "validate"):
            cfg.validate()

    # Structured logging
    from logging_config import init_logging, log_provider_status
    init_logging(app)
    log_provider_status(app)

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        supports_credentials=True,
    )

    # Rate limiter (RATELIMIT_ENABLED is off in testing)
    limiter.init_app(app)

    register_blueprints(app)
    _register_error_handlers(app)

    # Security headers
    @app.after_request
    def set_security_headers(response: Response) -> Response:
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self' 'unsafe-inline'; "
            "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com; "
            "font-src 'self' https://fonts.gstatic.com; "
            "img-src 'self' data: https://img.youtube.com; "
            "media-src 'self' data:; "
            "connect-src 'self'"
        )
        if not app.debug:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    return app


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(BadRequest)
    def handle_bad_request(exc: BadRequest):
        return jsonify({"error": exc.error, **exc.extra}), 400

    @app.errorhandler(RequestValidationError)
    def handle_validation_error(exc: RequestValidationError):
        return jsonify({"error": "Validation Error", "details": exc.details}), 400

    @app.errorhandler(400)
    def bad_request(exc):
        return jsonify({"error": "Bad Request"}), 400

    @app.errorhandler(404)
    def not_found(exc):
        if request.path.startswith("/api"):
            return jsonify({"error": "Not Found", "message": f"No route for {request.method} {request.path}"}), 404
        return exc

    @app.errorhandler(405)
    def method_not_allowed(exc):
        return jsonify({"error": "Method Not Allowed"}), 405

    @app.errorhandler(413)
    def too_large(exc):
        return jsonify({"error": "Request body too large"}), 413

    @app.errorhandler(429)
    def rate_limited(exc):
        return jsonify({"error": "Too many requests, please try again later."}), 429

    @app.errorhandler(Exception)
    def internal_error(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({
            "error": "Internal Server Error",
            "message": str(exc) if app.debug else "Something went wrong",
        }), 500


if __name__ == "__main__":
    create_app().run(debug=True, port=int(os.environ.get("PORT", 5010)))
