"""Session provider: owns the auth session of one client.

The provider restores any stored session once, then follows the backend's
auth-state notifications so every subscriber sees the same session. Views get
it injected (see ``blogapp.core.auth.context``) instead of reading globals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from blogapp.backend.auth_client import AuthClient, Subscription
from blogapp.backend.constants import ERR_UNEXPECTED
from blogapp.backend.responses import Session

logger = logging.getLogger(__name__)

SessionListener = Callable[[Optional[Session]], None]


class AuthRequiredError(RuntimeError):
    """Raised when an operation needs a signed-in user and there is none."""

    def __init__(self, message: str = "authentication required") -> None:
        super().__init__(message)


@dataclass
class AuthResult:
    success: bool
    data: Any = None
    error: Optional[str] = None
    code: Optional[str] = None


class SessionProvider:
    def __init__(self, auth: AuthClient) -> None:
        self._auth = auth
        self._session: Optional[Session] = None
        self._initialized = False
        self._listeners: List[SessionListener] = []
        self._subscription: Optional[Subscription] = None

    # --- state ---

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def user_id(self) -> Optional[int]:
        return self._session.user.id if self._session else None

    def require_user_id(self) -> int:
        if self._session is None:
            raise AuthRequiredError()
        return self._session.user.id

    # --- lifecycle ---

    def initialize(self) -> "SessionProvider":
        """Load the stored session once, then follow backend notifications."""
        if self._subscription is not None:
            return self
        response = self._auth.get_session()
        if response.error:
            logger.info("Stored session discarded: %s", response.error.message)
        self._set_session(response.session)
        self._initialized = True
        self._subscription = self._auth.on_auth_state_change(self._on_auth_state_change)
        return self

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self._listeners.clear()

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # --- operations ---

    def sign_up(self, email: str, password: str) -> AuthResult:
        response = self._auth.sign_up(email, password)
        if response.error:
            logger.info("there was a problem signing up: %s", response.error.message)
            return AuthResult(success=False, error=response.error.message, code=response.error.code)
        self._sync_unsubscribed(response.session)
        return AuthResult(success=True, data=response.data)

    def sign_in(self, email: str, password: str) -> AuthResult:
        try:
            response = self._auth.sign_in_with_password(email, password)
        except Exception:
            logger.exception("an error occurred during sign-in")
            return AuthResult(success=False, error="An unexpected error occurred", code=ERR_UNEXPECTED)
        if response.error:
            logger.info("sign in error occurred: %s", response.error.message)
            return AuthResult(success=False, error=response.error.message, code=response.error.code)
        self._sync_unsubscribed(response.session)
        return AuthResult(success=True, data=response.data)

    def sign_out(self) -> None:
        response = self._auth.sign_out()
        if response.error:
            logger.warning("there was an error signing out: %s", response.error.message)
        if self._session is not None:
            self._set_session(None)

    # --- internals ---

    def _on_auth_state_change(self, event: str, session: Optional[Session]) -> None:
        logger.debug("session provider received %s", event)
        self._set_session(session)

    def _sync_unsubscribed(self, session: Optional[Session]) -> None:
        # Subscribed providers are updated through the notification instead.
        if self._subscription is None and session is not None:
            self._set_session(session)

    def _set_session(self, session: Optional[Session]) -> None:
        self._session = session
        for listener in list(self._listeners):
            listener(session)


__all__ = ["AuthRequiredError", "AuthResult", "SessionProvider"]
