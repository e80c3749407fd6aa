"""Schemas for sign-up and sign-in payloads."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field, field_validator

from blogapp.core.auth.password import MAX_PASSWORD_BYTES

# Floor for sign-up passwords; PASSWORD_MIN_LENGTH in config may raise it.
PASSWORD_MIN_LENGTH = 6


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password should be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class SignInRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()
