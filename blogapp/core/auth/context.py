"""Request-scoped wiring of the backend client and session provider."""

from __future__ import annotations

from typing import Optional

from flask import Flask, g, request

from blogapp.backend import BackendClient, FlaskSessionStorage, MemoryStorage, create_client
from blogapp.core.auth.session_provider import SessionProvider


def get_backend() -> BackendClient:
    """Backend client bound to the browser's session cookie."""
    if "backend" not in g:
        g.backend = create_client(FlaskSessionStorage())
    return g.backend


def get_session_provider() -> SessionProvider:
    """Initialized provider for this request; created on first use."""
    if "session_provider" not in g:
        g.session_provider = SessionProvider(get_backend().auth).initialize()
    return g.session_provider


def _teardown_session_provider(exc: Optional[BaseException] = None) -> None:
    provider = g.pop("session_provider", None)
    if provider is not None:
        provider.close()
    g.pop("backend", None)
    g.pop("api_backend", None)


def init_session_context(app: Flask) -> None:
    app.teardown_request(_teardown_session_provider)

    @app.context_processor
    def inject_session():
        return {"current_session": get_session_provider().session}


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_bearer_backend() -> BackendClient:
    """Backend client bound to the request's bearer token instead of the cookie."""
    if "api_backend" not in g:
        client = create_client(MemoryStorage())
        token = bearer_token()
        if token:
            client.auth.set_session(token)
        g.api_backend = client
    return g.api_backend
