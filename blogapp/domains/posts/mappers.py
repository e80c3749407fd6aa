"""Post mappers for DTO responses."""

from __future__ import annotations

from blogapp.domains.posts.schemas.post_schemas import PostResponse


def map_post(row: dict) -> dict:
    return PostResponse(
        id=row["id"],
        title=row["title"],
        content=row["content"],
        user_id=row["user_id"],
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        pending=bool(row.get("pending", False)),
    ).model_dump()
