"""Auth HTTP controllers (JSON API)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request, session
from flask_jwt_extended import jwt_required

from blogapp.backend import AuthError, MemoryStorage, create_client
from blogapp.core.auth.context import bearer_token, get_bearer_backend
from blogapp.core.auth.csrf import rotate_csrf_token
from blogapp.core.utils.decorators import csrf_protected
from blogapp.extensions import limiter

auth_bp = Blueprint("auth_api", __name__)


def _error(error: AuthError, status: int | None = None):
    return jsonify({"ok": False, "error": error.code, "message": error.message}), status or error.status


def _session_payload(auth_session) -> dict:
    if auth_session is None:
        return {}
    return {
        "access_token": auth_session.access_token,
        "refresh_token": auth_session.refresh_token,
        "expires_at": auth_session.expires_at,
        "token_type": auth_session.token_type,
    }


@auth_bp.post("/signup")
@limiter.limit("5/minute")
def signup():
    payload = request.get_json(silent=True) or {}
    client = create_client(MemoryStorage())
    result = client.auth.sign_up(payload.get("email", ""), payload.get("password", ""))
    if result.error:
        return _error(result.error)
    user = result.user
    resp = {"ok": True, "user": {"id": user.id, "email": user.email}}
    if result.session is not None:
        resp.update(_session_payload(result.session))
        resp["csrf_token"] = rotate_csrf_token()
    return jsonify(resp)


@auth_bp.post("/login")
@limiter.limit("10/minute")
def login():
    # Ensure login is stateless even if a stale Flask session cookie is present.
    session.clear()
    payload = request.get_json(silent=True) or {}
    client = create_client(MemoryStorage())
    result = client.auth.sign_in_with_password(payload.get("email", ""), payload.get("password", ""))
    if result.error:
        return _error(result.error, 401)
    auth_session = result.session
    return jsonify(
        {
            "ok": True,
            **_session_payload(auth_session),
            "csrf_token": rotate_csrf_token(),
            "user": {"id": auth_session.user.id, "email": auth_session.user.email},
        }
    )


@auth_bp.post("/refresh")
@jwt_required(refresh=True)
@limiter.limit("30/minute")
def refresh():
    client = create_client(MemoryStorage())
    result = client.auth.refresh_session(bearer_token())
    if result.error:
        return _error(result.error, 401)
    return jsonify({"ok": True, **_session_payload(result.session)})


@auth_bp.post("/logout")
@jwt_required()
@csrf_protected
def logout():
    result = get_bearer_backend().auth.sign_out()
    if result.error:
        return _error(result.error, 500)
    return jsonify({"ok": True})


@auth_bp.get("/session")
@jwt_required()
def current_session():
    result = get_bearer_backend().auth.get_session()
    if result.session is None:
        return jsonify({"ok": False, "error": "unauthorized"}), 401
    auth_session = result.session
    return jsonify(
        {
            "ok": True,
            "user": {"id": auth_session.user.id, "email": auth_session.user.email},
            "expires_at": auth_session.expires_at,
        }
    )
