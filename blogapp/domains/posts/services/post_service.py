"""Post reads and writes through the backend client.

Every call filters on both the post id and the owning user id, on top of the
backend's own row-level policy.
"""

from __future__ import annotations

from typing import Optional

from blogapp.backend import APIResponse, BackendClient
from blogapp.backend.query import RETURN_REPRESENTATION

POSTS_TABLE = "posts"


def fetch_posts(client: BackendClient, user_id: int) -> APIResponse:
    return (
        client.table(POSTS_TABLE)
        .select("*")
        .eq("user_id", user_id)
        .order("created_at")
        .order("id")
        .execute()
    )


def fetch_post(client: BackendClient, user_id: int, post_id: int) -> APIResponse:
    return (
        client.table(POSTS_TABLE)
        .select("*")
        .match({"id": post_id, "user_id": user_id})
        .limit(1)
        .execute()
    )


def insert_post(
    client: BackendClient,
    user_id: int,
    *,
    title: str,
    content: str,
    returning: str = RETURN_REPRESENTATION,
) -> APIResponse:
    return (
        client.table(POSTS_TABLE)
        .insert([{"title": title, "content": content, "user_id": user_id}], returning=returning)
        .execute()
    )


def update_post(
    client: BackendClient,
    user_id: int,
    post_id: int,
    *,
    title: Optional[str] = None,
    content: Optional[str] = None,
) -> APIResponse:
    values = {key: val for key, val in (("title", title), ("content", content)) if val is not None}
    return (
        client.table(POSTS_TABLE)
        .update(values)
        .match({"id": post_id, "user_id": user_id})
        .execute()
    )


def delete_post(client: BackendClient, user_id: int, post_id: int) -> APIResponse:
    return (
        client.table(POSTS_TABLE)
        .delete()
        .match({"id": post_id, "user_id": user_id})
        .execute()
    )
