"""Tables exposed through the backend client and their access policies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from blogapp.domains.posts.models import Post


@dataclass(frozen=True)
class TableSpec:
    model: type
    # Rows are only visible to and writable by the user named in this column.
    owner_column: Optional[str] = None
    insertable: tuple[str, ...] = ()
    updatable: tuple[str, ...] = ()

    @property
    def columns(self) -> set[str]:
        return {column.key for column in self.model.__table__.columns}


TABLES: dict[str, TableSpec] = {
    "posts": TableSpec(
        model=Post,
        owner_column="user_id",
        insertable=("title", "content", "user_id"),
        updatable=("title", "content"),
    ),
}
