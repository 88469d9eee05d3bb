"""
Blueprint registration for the study companion API.

Every /api blueprint shares API_RATE_LIMIT; core routes (health checks,
front end) are not limited.
"""

from __future__ import annotations

from extensions import limiter


def register_blueprints(app):
    from blueprints.core import bp as core_bp
    from blueprints.chat import bp as chat_bp
    from blueprints.quiz import bp as quiz_bp
    from blueprints.flashcards import bp as flashcards_bp
    from blueprints.podcast import bp as podcast_bp
    from blueprints.timetable import bp as timetable_bp
    from blueprints.documents import bp as documents_bp
    from blueprints.video import bp as video_bp
    from blueprints.college import bp as college_bp
    from blueprints.ai import bp as ai_bp

    api_blueprints = (
        chat_bp,
        quiz_bp,
        flashcards_bp,
        podcast_bp,
        timetable_bp,
        documents_bp,
        video_bp,
        college_bp,
        ai_bp,
    )
    rate_limit = app.config.get("API_RATE_LIMIT", "100 per 15 minutes")
    for bp in api_blueprints:
        limiter.limit(rate_limit)(bp)
        app.register_blueprint(bp)

    app.register_blueprint(core_bp)

    if app.config.get("FRONTEND_DIST"):
        from blueprints.core import spa_fallback
        app.add_url_rule(
            "/<path:path>", "spa_fallback", spa_fallback,
            methods=["GET", "POST", "PUT", "DELETE"],
        )
