"""Session lifecycle operations used by operators."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from blogapp.core.auth.session_repository import SessionRepository
from blogapp.core.users.services import get_user
from blogapp.extensions import db

logger = logging.getLogger(__name__)


class SessionLifecycleService:
    def __init__(self, repository: Optional[SessionRepository] = None):
        self.repository = repository or SessionRepository()

    def admin_reset(
        self,
        user_id: int,
        *,
        session_id: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> dict:
        """Revoke a user's sessions; their clients see SIGNED_OUT on the next session check."""
        if not get_user(user_id):
            raise ValueError("not_found")

        reason_clean = (reason or "").strip()
        if not reason_clean:
            raise ValueError("reason_required")

        revoked_ids = self.repository.revoke_sessions(user_id, session_id=session_id)
        db.session.commit()
        logger.warning(
            "sessions reset for user %s: count=%s scope=%s reason=%r",
            user_id,
            len(revoked_ids),
            "single" if session_id else "all",
            reason_clean,
        )
        return {
            "reset_count": len(revoked_ids),
            "session_id": session_id,
            "reset_at": datetime.now(timezone.utc).isoformat(),
        }

    def live_session_count(self, user_id: int) -> int:
        return len(self.repository.list_sessions(user_id, live_only=True))


__all__ = ["SessionLifecycleService"]
