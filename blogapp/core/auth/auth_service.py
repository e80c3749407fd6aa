"""Token issuing and revocation.

Every sign-in issues a refresh token whose ``jti`` is recorded in
``session_token``. Access tokens carry that ``jti`` in their ``sid`` claim,
so revoking the record (sign-out, operator reset) invalidates the whole
session at once.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import InvalidTokenError

from blogapp.core.auth.models import JWTBlocklist, SessionToken
from blogapp.core.auth.password import verify_password
from blogapp.core.users.models import User
from blogapp.core.users.services import find_user_by_email, get_user
from blogapp.extensions import db

logger = logging.getLogger(__name__)


def authenticate_user(email: str, password: str) -> Optional[User]:
    """Return the user if credentials are valid."""
    user = find_user_by_email(email)
    if not verify_password(password, user.password_hash if user else None):
        return None
    return user if user.is_active else None


def issue_access_token(user: User, sid: str) -> str:
    return create_access_token(
        identity=str(user.id),
        additional_claims={"email": user.email, "sid": sid},
    )


def issue_tokens(user: User) -> dict[str, str]:
    """Create access and refresh tokens for a user."""
    refresh_token = create_refresh_token(identity=str(user.id))

    # Persist refresh jti for revocation checks
    decoded_refresh = decode_token(refresh_token)
    refresh_jti = decoded_refresh["jti"]
    expires = decoded_refresh.get("exp")
    # Naive UTC, matching the other DateTime columns.
    expires_at = datetime.fromtimestamp(expires, timezone.utc).replace(tzinfo=None) if expires else None
    db.session.add(
        SessionToken(
            user_id=user.id,
            jti=refresh_jti,
            expires_at=expires_at,
        )
    )
    db.session.commit()

    return {"access_token": issue_access_token(user, refresh_jti), "refresh_token": refresh_token}


def token_is_revoked(claims: dict) -> bool:
    """True when the token, its session record, or its user is no longer valid."""
    jti = claims.get("jti")
    if jti and JWTBlocklist.query.filter_by(jti=jti).first():
        return True
    sid = claims.get("sid") or (jti if claims.get("type") == "refresh" else None)
    if not sid:
        return True
    record = SessionToken.query.filter_by(jti=sid).first()
    if not record or record.revoked:
        return True
    user = get_user(int(claims["sub"]))
    return not user or not user.is_active


def revoke_session_tokens(access_token: Optional[str], refresh_token: Optional[str] = None) -> int:
    """Revoke the session behind the given tokens; returns the number of records touched."""
    touched = 0
    sids: set[str] = set()
    for raw in (access_token, refresh_token):
        claims = _decode_quietly(raw)
        if not claims:
            continue
        sid = claims.get("sid") or (claims.get("jti") if claims.get("type") == "refresh" else None)
        if sid:
            sids.add(sid)
        jti = claims.get("jti")
        if jti and claims.get("type") == "access" and not JWTBlocklist.query.filter_by(jti=jti).first():
            db.session.add(JWTBlocklist(jti=jti, created_by=int(claims["sub"])))
            touched += 1
    for sid in sids:
        record = SessionToken.query.filter_by(jti=sid).first()
        if record and not record.revoked:
            record.revoked = True
            touched += 1
    db.session.commit()
    return touched


def _decode_quietly(raw: Optional[str]) -> Optional[dict]:
    if not raw:
        return None
    try:
        return decode_token(raw, allow_expired=True)
    except (InvalidTokenError, JWTExtendedException) as exc:
        logger.info("Ignoring unreadable token during revocation: %s", exc)
        return None
