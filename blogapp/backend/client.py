"""Backend client: auth plus table access bound to one token storage."""

from __future__ import annotations

from typing import Any, Optional

from blogapp.backend.auth_client import AuthClient
from blogapp.backend.query import TableQuery
from blogapp.backend.storage import MemoryStorage
from blogapp.backend.tables import TABLES, TableSpec


class BackendClient:
    def __init__(self, storage: Any = None, tables: Optional[dict[str, TableSpec]] = None) -> None:
        self.auth = AuthClient(storage if storage is not None else MemoryStorage())
        self.tables = tables if tables is not None else TABLES

    def table(self, name: str) -> TableQuery:
        return TableQuery(self, name)


def create_client(storage: Any = None) -> BackendClient:
    """Build a client whose session lives in ``storage`` (defaults to memory)."""
    return BackendClient(storage=storage)
