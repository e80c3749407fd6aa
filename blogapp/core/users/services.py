"""User service layer."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func

from blogapp.core.auth.password import hash_password
from blogapp.core.users.models import User
from blogapp.extensions import db


def get_user(user_id: int) -> Optional[User]:
    return db.session.get(User, user_id)


def find_user_by_email(email: str) -> Optional[User]:
    normalized = (email or "").strip().lower()
    return User.query.filter(func.lower(User.email) == normalized).first()


def create_user(email: str, password: str) -> User:
    user = User(email=email.strip().lower(), password_hash=hash_password(password))
    db.session.add(user)
    db.session.commit()
    return user
