"""Password hashing with bcrypt (72-byte input limit)."""

from __future__ import annotations

from typing import Optional

from blogapp.extensions import bcrypt

MAX_PASSWORD_BYTES = 72

_dummy_hash: Optional[str] = None


def hash_password(plain_password: str) -> str:
    return bcrypt.generate_password_hash(plain_password).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Check a password; unknown accounts still pay for one bcrypt round trip."""
    global _dummy_hash
    if len(plain_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        # No stored hash can match: sign-up never accepts longer input.
        return False
    if not hashed_password:
        if _dummy_hash is None:
            _dummy_hash = hash_password("not-a-real-password")
        bcrypt.check_password_hash(_dummy_hash, plain_password)
        return False
    return bcrypt.check_password_hash(hashed_password, plain_password)
