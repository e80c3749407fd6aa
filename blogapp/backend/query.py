"""Table query builder of the backend client.

Usage mirrors a PostgREST client::

    client.table("posts").select("*").eq("user_id", 7).order("created_at").execute()
    client.table("posts").delete().match({"id": 3, "user_id": 7}).execute()

``execute()`` always returns an ``APIResponse``; failures come back as
``APIError`` values.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError

from blogapp.backend.constants import (
    ERR_DATABASE,
    ERR_INVALID_QUERY,
    ERR_MISSING_FILTER,
    ERR_NOT_AUTHENTICATED,
    ERR_READ_ONLY_COLUMN,
    ERR_RLS,
    ERR_UNKNOWN_COLUMN,
    ERR_UNKNOWN_TABLE,
)
from blogapp.backend.responses import APIError, APIResponse
from blogapp.backend.tables import TableSpec
from blogapp.extensions import db

if TYPE_CHECKING:
    from blogapp.backend.client import BackendClient

logger = logging.getLogger(__name__)

RETURN_REPRESENTATION = "representation"
RETURN_MINIMAL = "minimal"


class TableQuery:
    def __init__(self, client: "BackendClient", name: str) -> None:
        self._client = client
        self._name = name
        self._spec: Optional[TableSpec] = client.tables.get(name)
        self._action: Optional[str] = None
        self._columns = "*"
        self._rows: list[dict] = []
        self._values: dict = {}
        self._filters: list[tuple[str, Any]] = []
        self._order: list[tuple[str, bool]] = []
        self._limit: Optional[int] = None
        self._returning = RETURN_REPRESENTATION

    # --- actions ---

    def select(self, columns: str = "*") -> "TableQuery":
        self._action = "select"
        self._columns = columns
        return self

    def insert(self, rows: dict | list[dict], returning: str = RETURN_REPRESENTATION) -> "TableQuery":
        self._action = "insert"
        self._rows = [rows] if isinstance(rows, dict) else list(rows)
        self._returning = returning
        return self

    def update(self, values: dict, returning: str = RETURN_REPRESENTATION) -> "TableQuery":
        self._action = "update"
        self._values = dict(values)
        self._returning = returning
        return self

    def delete(self, returning: str = RETURN_REPRESENTATION) -> "TableQuery":
        self._action = "delete"
        self._returning = returning
        return self

    # --- modifiers ---

    def eq(self, column: str, value: Any) -> "TableQuery":
        self._filters.append((column, value))
        return self

    def match(self, query: dict) -> "TableQuery":
        for column, value in query.items():
            self.eq(column, value)
        return self

    def order(self, column: str, desc: bool = False) -> "TableQuery":
        self._order.append((column, desc))
        return self

    def limit(self, count: int) -> "TableQuery":
        self._limit = count
        return self

    # --- execution ---

    def execute(self) -> APIResponse:
        if self._spec is None:
            return _failure(f'relation "{self._name}" does not exist', ERR_UNKNOWN_TABLE)
        if self._action is None:
            return _failure("no operation selected", ERR_INVALID_QUERY)
        error = self._validate_columns()
        if error:
            return APIResponse(error=error)

        owner_id = None
        if self._spec.owner_column:
            owner_id = self._client.auth.current_user_id()
            if owner_id is None:
                return _failure("not authenticated", ERR_NOT_AUTHENTICATED)

        runner = getattr(self, f"_run_{self._action}")
        try:
            return runner(owner_id)
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error("%s on %s failed: %s", self._action, self._name, exc)
            return _failure("database error", ERR_DATABASE, details=str(exc))

    def _run_select(self, owner_id: Optional[int]) -> APIResponse:
        query = self._scoped(owner_id)
        for column, desc in self._order:
            attr = getattr(self._spec.model, column)
            query = query.order_by(attr.desc() if desc else attr.asc())
        if self._limit is not None:
            query = query.limit(self._limit)
        rows = [_row_to_dict(obj, self._selected_columns()) for obj in query.all()]
        return APIResponse(data=rows, count=len(rows))

    def _run_insert(self, owner_id: Optional[int]) -> APIResponse:
        owner = self._spec.owner_column
        if owner and any(row.get(owner) != owner_id for row in self._rows):
            return _failure(f'new row violates row-level security policy for table "{self._name}"', ERR_RLS)
        objects = [self._spec.model(**row) for row in self._rows]
        db.session.add_all(objects)
        db.session.commit()
        return self._result(objects)

    def _run_update(self, owner_id: Optional[int]) -> APIResponse:
        if not self._filters:
            return _failure("UPDATE requires a filter", ERR_MISSING_FILTER)
        objects = self._scoped(owner_id).all()
        for obj in objects:
            for column, value in self._values.items():
                setattr(obj, column, value)
        db.session.commit()
        return self._result(objects)

    def _run_delete(self, owner_id: Optional[int]) -> APIResponse:
        if not self._filters:
            return _failure("DELETE requires a filter", ERR_MISSING_FILTER)
        objects = self._scoped(owner_id).all()
        rows = [_row_to_dict(obj) for obj in objects]
        for obj in objects:
            db.session.delete(obj)
        db.session.commit()
        data = rows if self._returning == RETURN_REPRESENTATION else []
        return APIResponse(data=data, count=len(rows))

    # --- helpers ---

    def _scoped(self, owner_id: Optional[int]):
        model = self._spec.model
        query = db.session.query(model)
        for column, value in self._filters:
            query = query.filter(getattr(model, column) == value)
        if self._spec.owner_column:
            query = query.filter(getattr(model, self._spec.owner_column) == owner_id)
        return query

    def _result(self, objects: list) -> APIResponse:
        if self._returning == RETURN_MINIMAL:
            return APIResponse(data=[], count=len(objects))
        return APIResponse(data=[_row_to_dict(obj) for obj in objects], count=len(objects))

    def _selected_columns(self) -> Optional[set[str]]:
        if self._columns.strip() == "*":
            return None
        return {part.strip() for part in self._columns.split(",") if part.strip()}

    def _validate_columns(self) -> Optional[APIError]:
        known = self._spec.columns
        referenced: list[str] = [column for column, _ in self._filters]
        referenced += [column for column, _ in self._order]
        referenced += sorted(self._selected_columns() or ())
        for row in self._rows:
            referenced += list(row)
        referenced += list(self._values)
        unknown = _first_missing(referenced, known)
        if unknown:
            return APIError(f'column "{unknown}" of relation "{self._name}" does not exist', ERR_UNKNOWN_COLUMN)

        if self._action == "insert":
            blocked = _first_missing((key for row in self._rows for key in row), set(self._spec.insertable))
        elif self._action == "update":
            blocked = _first_missing(self._values, set(self._spec.updatable))
        else:
            blocked = None
        if blocked:
            return APIError(f'column "{blocked}" can not be written', ERR_READ_ONLY_COLUMN)
        return None


def _first_missing(columns: Iterable[str], allowed: set[str]) -> Optional[str]:
    for column in columns:
        if column not in allowed:
            return column
    return None


def _row_to_dict(obj: Any, columns: Optional[set[str]] = None) -> dict:
    row = {}
    for column in obj.__table__.columns:
        if columns is not None and column.key not in columns:
            continue
        value = getattr(obj, column.key)
        if isinstance(value, (datetime, date)):
            value = value.isoformat()
        row[column.key] = value
    return row


def _failure(message: str, code: str, details: Optional[str] = None) -> APIResponse:
    return APIResponse(error=APIError(message, code, details))


__all__ = ["TableQuery", "RETURN_MINIMAL", "RETURN_REPRESENTATION"]
