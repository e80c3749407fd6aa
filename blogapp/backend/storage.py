"""Token storage backends for the auth client."""

from __future__ import annotations

from typing import Any, Dict, Optional

from flask import session


class MemoryStorage:
    """Dict-backed storage for bearer-token API calls and scripts."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._items: Dict[str, Any] = dict(initial or {})

    def get_item(self, key: str) -> Any:
        return self._items.get(key)

    def set_item(self, key: str, value: Any) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FlaskSessionStorage:
    """Keeps tokens in the signed Flask session cookie; requires a request context."""

    def get_item(self, key: str) -> Any:
        return session.get(key)

    def set_item(self, key: str, value: Any) -> None:
        session[key] = value
        session.permanent = True

    def remove_item(self, key: str) -> None:
        session.pop(key, None)


__all__ = ["FlaskSessionStorage", "MemoryStorage"]
