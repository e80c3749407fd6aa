"""Persistence for operator-driven session revocation."""

from __future__ import annotations

from typing import Optional

from blogapp.core.auth.models import JWTBlocklist, SessionToken
from blogapp.extensions import db


class SessionRepository:
    """Marks session records revoked. Repeated calls are idempotent."""

    def __init__(self, session=None):
        self._session = session or db.session

    def revoke_sessions(self, user_id: int, *, session_id: Optional[str] = None) -> list[str]:
        """Revoke a user's session records and blocklist their refresh jtis.

        Returns the jtis of records that were still live before the call.
        """
        query = SessionToken.query.filter_by(user_id=user_id)
        if session_id:
            query = query.filter(SessionToken.jti == session_id)
        revoked_ids: list[str] = []
        for token in query.all():
            if token.revoked:
                continue
            token.revoked = True
            revoked_ids.append(token.jti)
            if not JWTBlocklist.query.filter_by(jti=token.jti).first():
                self._session.add(JWTBlocklist(jti=token.jti, created_by=None))
        # No commit; the service owns the transaction.
        return revoked_ids

    def list_sessions(self, user_id: int, *, live_only: bool = False) -> list[SessionToken]:
        query = SessionToken.query.filter_by(user_id=user_id)
        if live_only:
            query = query.filter(SessionToken.revoked.is_(False))
        return query.order_by(SessionToken.created_at.desc()).all()


__all__ = ["SessionRepository"]
