"""Auth half of the backend client.

Calls return ``AuthResponse`` objects and never raise for backend-reported
failures. Session changes are published on a per-client ``EventBus`` and
delivered to ``on_auth_state_change`` callbacks.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from flask import current_app
from flask_jwt_extended import decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from blogapp.backend.constants import (
    AUTH_INITIAL_SESSION,
    AUTH_SIGNED_IN,
    AUTH_SIGNED_OUT,
    AUTH_TOKEN_REFRESHED,
    ERR_INVALID_CREDENTIALS,
    ERR_SESSION_MISSING,
    ERR_SESSION_REVOKED,
    ERR_UNEXPECTED,
    ERR_USER_EXISTS,
    ERR_VALIDATION,
    STORAGE_KEY,
)
from blogapp.backend.responses import (
    AuthChangeEvent,
    AuthError,
    AuthResponse,
    Session,
    SessionUser,
)
from blogapp.core.auth.auth_service import (
    authenticate_user,
    issue_access_token,
    issue_tokens,
    revoke_session_tokens,
    token_is_revoked,
)
from blogapp.core.auth.schemas import PASSWORD_MIN_LENGTH, SignInRequest, SignUpRequest
from blogapp.core.events.event_bus import ALL_EVENTS, EventBus
from blogapp.core.users.models import User
from blogapp.core.users.services import create_user, find_user_by_email, get_user
from blogapp.extensions import db

logger = logging.getLogger(__name__)

AuthStateCallback = Callable[[str, Optional[Session]], None]

INVALID_CREDENTIALS_MESSAGE = "Invalid login credentials"


class Subscription:
    """Handle returned by ``on_auth_state_change``."""

    def __init__(self, unsubscribe: Callable[[], None]) -> None:
        self._unsubscribe = unsubscribe
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._unsubscribe()
            self.active = False


class AuthClient:
    def __init__(self, storage: Any, *, storage_key: str = STORAGE_KEY, bus: Optional[EventBus] = None):
        self._storage = storage
        self._storage_key = storage_key
        self._bus = bus or EventBus()
        self._session: Optional[Session] = None
        self._loaded = False

    # --- sign up / sign in / sign out ---

    def sign_up(self, email: str, password: str) -> AuthResponse:
        try:
            payload = SignUpRequest.model_validate({"email": email, "password": password})
        except ValidationError as exc:
            return AuthResponse(error=AuthError(_first_error(exc), ERR_VALIDATION, 422))
        min_length = current_app.config.get("PASSWORD_MIN_LENGTH", PASSWORD_MIN_LENGTH)
        if len(payload.password) < min_length:
            message = f"Password should be at least {min_length} characters"
            return AuthResponse(error=AuthError(message, ERR_VALIDATION, 422))

        if find_user_by_email(payload.email):
            return AuthResponse(error=AuthError("User already registered", ERR_USER_EXISTS, 422))
        try:
            user = create_user(payload.email, payload.password)
        except IntegrityError:
            # Lost a race with a concurrent sign-up for the same address.
            db.session.rollback()
            logger.info("Duplicate sign-up for %s", payload.email)
            return AuthResponse(error=AuthError("User already registered", ERR_USER_EXISTS, 422))
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error("Creating account for %s failed: %s", payload.email, exc)
            return AuthResponse(error=AuthError("Database error saving new user", ERR_UNEXPECTED, 500))

        logger.info("Registered user %s", user.id)
        data: dict = {"user": _session_user(user), "session": None}
        if current_app.config.get("AUTO_LOGIN_ON_SIGNUP", False):
            self._revoke_stored()
            session = self._start_session(user)
            data["session"] = session
            self._emit(AUTH_SIGNED_IN, session)
        return AuthResponse(data=data)

    def sign_in_with_password(self, email: str, password: str) -> AuthResponse:
        try:
            payload = SignInRequest.model_validate({"email": email, "password": password})
        except ValidationError:
            return AuthResponse(error=AuthError(INVALID_CREDENTIALS_MESSAGE, ERR_INVALID_CREDENTIALS, 400))

        user = authenticate_user(payload.email, payload.password)
        if not user:
            logger.info("Rejected sign-in for %s", payload.email)
            return AuthResponse(error=AuthError(INVALID_CREDENTIALS_MESSAGE, ERR_INVALID_CREDENTIALS, 400))

        self._revoke_stored()
        session = self._start_session(user)
        self._emit(AUTH_SIGNED_IN, session)
        return AuthResponse(data={"user": session.user, "session": session})

    def sign_out(self) -> AuthResponse:
        tokens = self._storage.get_item(self._storage_key)
        if not tokens:
            self._session = None
            self._loaded = True
            return AuthResponse()

        error = None
        try:
            revoke_session_tokens(tokens.get("access_token"), tokens.get("refresh_token"))
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error("Revoking session tokens failed: %s", exc)
            error = AuthError("Failed to revoke session", ERR_UNEXPECTED, 500)

        self._clear()
        self._emit(AUTH_SIGNED_OUT, None)
        return AuthResponse(error=error)

    # --- session access ---

    def get_session(self) -> AuthResponse:
        """Return the stored session, refreshing or discarding it as needed."""
        tokens = self._storage.get_item(self._storage_key)
        if not tokens or not tokens.get("access_token"):
            self._session = None
            self._loaded = True
            return AuthResponse(data={"session": None})

        access_token = tokens["access_token"]
        refresh_token = tokens.get("refresh_token")
        try:
            claims = decode_token(access_token)
        except ExpiredSignatureError:
            if refresh_token:
                return self.refresh_session(refresh_token)
            return self._drop_session(AuthError("Session expired", ERR_SESSION_REVOKED, 401))
        except (InvalidTokenError, JWTExtendedException) as exc:
            logger.warning("Discarding unreadable access token: %s", exc)
            return self._drop_session(AuthError("Invalid session", ERR_SESSION_REVOKED, 401))

        if claims.get("type") != "access" or token_is_revoked(claims):
            return self._drop_session(AuthError("Session revoked", ERR_SESSION_REVOKED, 401))

        self._session = _session_from_claims(access_token, refresh_token, claims)
        self._loaded = True
        return AuthResponse(data={"session": self._session, "user": self._session.user})

    def refresh_session(self, refresh_token: Optional[str] = None) -> AuthResponse:
        if refresh_token is None:
            tokens = self._storage.get_item(self._storage_key) or {}
            refresh_token = tokens.get("refresh_token")
        if not refresh_token:
            return AuthResponse(error=AuthError("Auth session missing", ERR_SESSION_MISSING, 400))

        try:
            claims = decode_token(refresh_token)
        except (InvalidTokenError, JWTExtendedException) as exc:
            logger.info("Refresh token rejected: %s", exc)
            return self._drop_session(AuthError("Invalid refresh token", ERR_SESSION_REVOKED, 401))
        if claims.get("type") != "refresh" or token_is_revoked(claims):
            return self._drop_session(AuthError("Session revoked", ERR_SESSION_REVOKED, 401))

        user = get_user(int(claims["sub"]))
        session = self._store(issue_access_token(user, sid=claims["jti"]), refresh_token)
        self._emit(AUTH_TOKEN_REFRESHED, session)
        return AuthResponse(data={"session": session, "user": session.user})

    def set_session(self, access_token: str, refresh_token: Optional[str] = None) -> AuthResponse:
        """Adopt externally supplied tokens (bearer header, scripts)."""
        self._storage.set_item(
            self._storage_key,
            {"access_token": access_token, "refresh_token": refresh_token},
        )
        return self.get_session()

    def current_user_id(self) -> Optional[int]:
        session = self._session if self._loaded else self.get_session().session
        return session.user.id if session else None

    # --- notifications ---

    def on_auth_state_change(self, callback: AuthStateCallback) -> Subscription:
        """Register ``callback(event, session)``; it first receives INITIAL_SESSION."""

        def _handler(event: AuthChangeEvent) -> None:
            callback(event.event_type, event.session)

        unsubscribe = self._bus.subscribe(ALL_EVENTS, _handler)
        initial = self._session if self._loaded else self.get_session().session
        callback(AUTH_INITIAL_SESSION, initial)
        return Subscription(unsubscribe)

    # --- helpers ---

    def _revoke_stored(self) -> None:
        """Retire the tokens a new sign-in replaces."""
        tokens = self._storage.get_item(self._storage_key)
        if not tokens or not tokens.get("access_token"):
            return
        try:
            revoke_session_tokens(tokens["access_token"], tokens.get("refresh_token"))
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error("Revoking replaced session failed: %s", exc)

    def _start_session(self, user: User) -> Session:
        tokens = issue_tokens(user)
        return self._store(tokens["access_token"], tokens["refresh_token"])

    def _store(self, access_token: str, refresh_token: Optional[str]) -> Session:
        claims = decode_token(access_token)
        self._storage.set_item(
            self._storage_key,
            {"access_token": access_token, "refresh_token": refresh_token},
        )
        self._session = _session_from_claims(access_token, refresh_token, claims)
        self._loaded = True
        return self._session

    def _clear(self) -> None:
        self._storage.remove_item(self._storage_key)
        self._session = None
        self._loaded = True

    def _drop_session(self, error: AuthError) -> AuthResponse:
        self._clear()
        self._emit(AUTH_SIGNED_OUT, None)
        return AuthResponse(data={"session": None}, error=error)

    def _emit(self, event_type: str, session: Optional[Session]) -> None:
        logger.debug("auth state change: %s", event_type)
        self._bus.publish(AuthChangeEvent(event_type=event_type, session=session))


def _session_user(user: User) -> SessionUser:
    return SessionUser(id=user.id, email=user.email)


def _session_from_claims(access_token: str, refresh_token: Optional[str], claims: dict) -> Session:
    return Session(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_at=claims.get("exp"),
        user=SessionUser(id=int(claims["sub"]), email=claims.get("email", "")),
    )


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    field = ".".join(str(part) for part in err.get("loc", ()))
    if field == "password" and err.get("type") == "string_too_short":
        return f"Password should be at least {err['ctx']['min_length']} characters"
    if field == "email":
        return "Unable to validate email address: invalid format"
    if err.get("type") == "value_error":
        return str(err["ctx"]["error"])
    return err.get("msg", "Invalid input")


__all__ = ["AuthClient", "Subscription"]
