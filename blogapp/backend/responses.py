"""Response envelopes returned by the backend client.

Every backend call returns a ``{data, error}`` pair instead of raising, so
callers branch on ``response.error`` the same way for auth and table calls.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass
class AuthError:
    message: str
    code: str
    status: int = 400


@dataclass
class APIError:
    message: str
    code: str
    details: Optional[str] = None


@dataclass
class SessionUser:
    id: int
    email: str


@dataclass
class Session:
    access_token: str
    refresh_token: Optional[str]
    expires_at: Optional[int]
    user: SessionUser
    token_type: str = "bearer"

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class AuthResponse:
    data: dict = field(default_factory=dict)
    error: Optional[AuthError] = None

    @property
    def session(self) -> Optional[Session]:
        return self.data.get("session")

    @property
    def user(self) -> Optional[SessionUser]:
        return self.data.get("user")


@dataclass
class APIResponse:
    data: list[dict[str, Any]] = field(default_factory=list)
    error: Optional[APIError] = None
    count: Optional[int] = None


@dataclass
class AuthChangeEvent:
    """Published on the client's bus whenever the held session changes."""

    event_type: str
    session: Optional[Session]


__all__ = [
    "APIError",
    "APIResponse",
    "AuthChangeEvent",
    "AuthError",
    "AuthResponse",
    "Session",
    "SessionUser",
]
