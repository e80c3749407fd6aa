"""Auth and data backend consumed by the views through ``{data, error}`` responses."""

from blogapp.backend.auth_client import AuthClient, Subscription
from blogapp.backend.client import BackendClient, create_client
from blogapp.backend.responses import (
    APIError,
    APIResponse,
    AuthError,
    AuthResponse,
    Session,
    SessionUser,
)
from blogapp.backend.storage import FlaskSessionStorage, MemoryStorage

__all__ = [
    "APIError",
    "APIResponse",
    "AuthClient",
    "AuthError",
    "AuthResponse",
    "BackendClient",
    "FlaskSessionStorage",
    "MemoryStorage",
    "Session",
    "SessionUser",
    "Subscription",
    "create_client",
]
