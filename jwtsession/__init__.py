"""jwtsession application factory and bootstrap."""

from __future__ import annotations

import os
from typing import Optional

from flask import Flask

from jwtsession.config import config_by_name
from jwtsession.extensions import init_extensions


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the demo Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()

    app = Flask(__name__)
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)

    init_extensions(app)
    _register_blueprints(app)
    _register_error_handlers(app)

    from jwtsession.scripts.issue_token import register_commands

    register_commands(app)

    return app


def _register_blueprints(app: Flask) -> None:
    from jwtsession.core.auth.controllers import demo_bp  # local import to avoid circulars

    app.register_blueprint(demo_bp)


def _register_error_handlers(app: Flask) -> None:
    """Basic JSON error responses."""
    from werkzeug.exceptions import HTTPException

    from jwtsession.core.session.errors import AuthError, JWTSessionError

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(JWTSessionError)
    def _session_error(exc: JWTSessionError):
        app.logger.warning("Session error: %s", exc)
        status = 401 if isinstance(exc, AuthError) else 400
        return {"ok": False, "error": exc.code}, status

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500
