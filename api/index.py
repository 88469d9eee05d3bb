"""Serverless entry point: exposes the WSGI app as a module-level ``app``."""

import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app  # noqa: E402

try:
    app = create_app()
except Exception:
    logging.getLogger(__name__).exception("Failed to create app")
    raise
