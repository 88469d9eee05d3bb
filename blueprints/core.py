"""Core routes: banner or built front end, health checks."""

from __future__ import annotations

import logging
import os
import time
from datetime import datetime, timezone

from flask import Blueprint, abort, current_app, jsonify, request, send_from_directory

from helpers import get_llm

logger = logging.getLogger(__name__)

bp = Blueprint("core", __name__)

BANNER = "AUREM study companion API is running."


def _frontend_dir() -> str | None:
    dist = current_app.config.get("FRONTEND_DIST") or ""
    if dist and os.path.isfile(os.path.join(dist, "index.html")):
        return dist
    return None


@bp.route("/")
def index():
    dist = _frontend_dir()
    if dist is None:
        return BANNER, 200, {"Content-Type": "text/plain; charset=utf-8"}
    return send_from_directory(dist, "index.html")


def spa_fallback(path: str):
    """Static asset from the built front end, else index.html for client-side routes."""
    if path.startswith("api/") or request.method != "GET":
        abort(404)
    dist = _frontend_dir()
    if dist is None:
        abort(404)
    if os.path.isfile(os.path.join(dist, path)):
        return send_from_directory(dist, path)
    return send_from_directory(dist, "index.html")


# ── Health checks ─────────────────────────────────────────

_start_time = time.time()


@bp.route("/health")
def health():
    return jsonify({
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "uptime": round(time.time() - _start_time, 3),
    })


@bp.route("/live")
def live():
    return jsonify({"status": "alive"}), 200


@bp.route("/ready")
def ready():
    """Ready when at least one provider has a key and a closed or half-open circuit."""
    providers = get_llm().status()
    usable = [
        name for name, info in providers.items()
        if info["configured"] and info["circuit"] != "open"
    ]
    if not usable:
        logger.error("Readiness check failed: no usable AI provider")
        return jsonify({"status": "not_ready", "providers": providers}), 503
    return jsonify({"status": "ready", "providers": providers}), 200
