"""Per-session CSRF tokens for cookie-authenticated forms and API calls."""

from __future__ import annotations

import secrets
from typing import Optional

from flask import request, session

CSRF_TOKEN_SESSION_KEY = "_csrf_token"
CSRF_HEADER = "X-CSRF-Token"
CSRF_FORM_FIELD = "csrf_token"


def generate_csrf_token() -> str:
    """Token bound to the current cookie session, created on first use."""
    token = session.get(CSRF_TOKEN_SESSION_KEY)
    if not token:
        token = rotate_csrf_token()
    return token


def rotate_csrf_token() -> str:
    """Issue a fresh token; called whenever the signed-in identity changes."""
    token = secrets.token_hex(32)
    session[CSRF_TOKEN_SESSION_KEY] = token
    return token


def submitted_csrf_token() -> Optional[str]:
    return request.headers.get(CSRF_HEADER) or request.form.get(CSRF_FORM_FIELD)


def validate_csrf_token(token: Optional[str]) -> bool:
    expected = session.get(CSRF_TOKEN_SESSION_KEY)
    if not token or not expected:
        return False
    return secrets.compare_digest(token, expected)
