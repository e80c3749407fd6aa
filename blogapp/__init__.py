"""Blog application factory and bootstrap."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, redirect, render_template, request, url_for

from blogapp.config import config_by_name
from blogapp.core.auth.csrf import generate_csrf_token
from blogapp.extensions import init_extensions, jwt

JSON_PREFIXES = ("/api", "/auth")


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the blog Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(
        __name__,
        instance_path=str(instance_root),
        instance_relative_config=True,
        template_folder=str(Path(__file__).parent / "templates"),
    )
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)

    # Normalize sqlite path to absolute to avoid "unable to open database file"
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///"):
        db_path = db_uri.replace("sqlite:///", "", 1)
        abs_path = project_root / db_path
        abs_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{abs_path}"

    _configure_logging(app)
    init_extensions(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_auth_handlers(app)

    @app.get("/")
    def index():
        from blogapp.core.auth.context import get_session_provider

        return render_template("index.html", auth_session=get_session_provider().session)

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    from blogapp.scripts import register_commands

    register_commands(app)

    return app


def _configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")), logging.INFO)
    logging.getLogger("blogapp").setLevel(level)
    app.logger.setLevel(level)


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from blogapp.core.auth.controllers import auth_bp  # local import to avoid circulars
    from blogapp.core.auth.pages import auth_pages_bp
    from blogapp.domains.posts.controllers.dashboard_pages import dashboard_pages_bp
    from blogapp.domains.posts.controllers.post_api import posts_api_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(posts_api_bp, url_prefix="/api/posts")
    app.register_blueprint(auth_pages_bp, url_prefix="/pages")
    app.register_blueprint(dashboard_pages_bp, url_prefix="/pages/dashboard")


def _wants_json() -> bool:
    return request.path.startswith(JSON_PREFIXES)


def _register_error_handlers(app: Flask) -> None:
    """JSON error responses for the API, redirects for pages."""
    from werkzeug.exceptions import HTTPException

    from blogapp.core.auth.session_provider import AuthRequiredError

    @app.errorhandler(AuthRequiredError)
    def _auth_required(exc: AuthRequiredError):
        if _wants_json():
            return {"ok": False, "error": "unauthorized"}, 401
        return redirect(url_for("auth_pages.login"))

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        if not _wants_json():
            return exc
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        if not _wants_json():
            return "Internal Server Error", 500
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500


def _register_auth_handlers(app: Flask) -> None:
    """JWT callbacks, session context and template helpers."""
    from blogapp.core.auth.auth_service import token_is_revoked
    from blogapp.core.auth.context import init_session_context

    init_session_context(app)

    @jwt.token_in_blocklist_loader
    def _token_revoked(jwt_header: dict, jwt_payload: dict) -> bool:
        return token_is_revoked(jwt_payload)

    def _unauthorized(*_args):
        return jsonify({"ok": False, "error": "unauthorized"}), 401

    jwt.unauthorized_loader(_unauthorized)
    jwt.invalid_token_loader(_unauthorized)
    jwt.expired_token_loader(_unauthorized)
    jwt.revoked_token_loader(_unauthorized)

    @app.context_processor
    def inject_csrf_token():
        return {"csrf_token": generate_csrf_token}
