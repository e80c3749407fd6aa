"""Reusable decorators for controllers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from flask import current_app, jsonify, redirect, request, url_for

from blogapp.core.auth.context import get_session_provider
from blogapp.core.auth.csrf import submitted_csrf_token, validate_csrf_token

F = TypeVar("F", bound=Callable)

SAFE_METHODS = ("GET", "HEAD", "OPTIONS")


def csrf_protected(fn: F) -> F:
    """Reject unsafe requests whose CSRF header or form field does not match the session."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        if request.method in SAFE_METHODS or not current_app.config.get("WTF_CSRF_ENABLED", True):
            return fn(*args, **kwargs)
        if not validate_csrf_token(submitted_csrf_token()):
            if request.is_json or request.path.startswith(("/api", "/auth")):
                return jsonify({"ok": False, "error": "csrf_failed"}), 403
            return "CSRF token missing or invalid", 403
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def session_required(fn: F) -> F:
    """Redirect page visitors without a session to the login page."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        if not get_session_provider().is_authenticated:
            return redirect(url_for("auth_pages.login"))
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
