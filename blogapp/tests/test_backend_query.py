"""Table queries: row-level ownership, filters and error reporting."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

from blogapp.backend.constants import (
    ERR_MISSING_FILTER,
    ERR_NOT_AUTHENTICATED,
    ERR_READ_ONLY_COLUMN,
    ERR_RLS,
    ERR_UNKNOWN_COLUMN,
    ERR_UNKNOWN_TABLE,
)
from blogapp.backend.query import RETURN_MINIMAL
from blogapp.domains.posts.models import Post
from blogapp.extensions import db


@pytest.fixture
def owners(make_user, signed_in_client):
    alice = make_user("alice@example.com")
    bob = make_user("bob@example.com")
    return {
        "alice": alice,
        "bob": bob,
        "alice_client": signed_in_client("alice@example.com"),
        "bob_client": signed_in_client("bob@example.com"),
    }


def _insert(client, user_id, title="Title", content="Body"):
    response = client.table("posts").insert({"title": title, "content": content, "user_id": user_id}).execute()
    assert response.error is None, response.error
    return response.data[0]


def test_insert_returns_stored_row(owners):
    row = _insert(owners["alice_client"], owners["alice"].id, "Hello")

    assert isinstance(row["id"], int)
    assert row["user_id"] == owners["alice"].id
    assert row["title"] == "Hello"
    assert isinstance(row["created_at"], str)


def test_insert_minimal_returns_no_rows(owners):
    response = (
        owners["alice_client"]
        .table("posts")
        .insert({"title": "t", "content": "c", "user_id": owners["alice"].id}, returning=RETURN_MINIMAL)
        .execute()
    )

    assert response.error is None
    assert response.data == []
    assert response.count == 1
    assert Post.query.count() == 1


def test_insert_for_another_user_violates_policy(owners):
    response = (
        owners["alice_client"]
        .table("posts")
        .insert({"title": "t", "content": "c", "user_id": owners["bob"].id})
        .execute()
    )

    assert response.error.code == ERR_RLS
    assert Post.query.count() == 0


def test_select_only_sees_own_rows(owners):
    _insert(owners["alice_client"], owners["alice"].id, "mine")
    _insert(owners["bob_client"], owners["bob"].id, "theirs")

    # Even an explicit filter on the other owner comes back empty.
    response = owners["alice_client"].table("posts").select("*").eq("user_id", owners["bob"].id).execute()
    assert response.error is None
    assert response.data == []

    response = owners["alice_client"].table("posts").select("id, title").execute()
    assert [row["title"] for row in response.data] == ["mine"]
    assert set(response.data[0]) == {"id", "title"}


def test_select_orders_and_limits(owners):
    for title in ("one", "two", "three"):
        _insert(owners["alice_client"], owners["alice"].id, title)

    response = owners["alice_client"].table("posts").select("*").order("id", desc=True).limit(2).execute()

    assert [row["title"] for row in response.data] == ["three", "two"]


def test_update_and_delete_ignore_other_users_rows(owners):
    bobs = _insert(owners["bob_client"], owners["bob"].id, "bob's")

    updated = (
        owners["alice_client"]
        .table("posts")
        .update({"title": "hijacked"})
        .match({"id": bobs["id"]})
        .execute()
    )
    deleted = owners["alice_client"].table("posts").delete().match({"id": bobs["id"]}).execute()

    assert updated.error is None and updated.data == []
    assert deleted.error is None and deleted.data == []
    assert db.session.get(Post, bobs["id"]).title == "bob's"


def test_update_and_delete_require_filters(owners):
    _insert(owners["alice_client"], owners["alice"].id)

    assert owners["alice_client"].table("posts").update({"title": "x"}).execute().error.code == ERR_MISSING_FILTER
    assert owners["alice_client"].table("posts").delete().execute().error.code == ERR_MISSING_FILTER
    assert Post.query.count() == 1


def test_owner_column_is_not_updatable(owners):
    row = _insert(owners["alice_client"], owners["alice"].id)

    response = (
        owners["alice_client"]
        .table("posts")
        .update({"user_id": owners["bob"].id})
        .eq("id", row["id"])
        .execute()
    )

    assert response.error.code == ERR_READ_ONLY_COLUMN


def test_anonymous_access_is_rejected(backend):
    response = backend.table("posts").select("*").execute()

    assert response.error.code == ERR_NOT_AUTHENTICATED


def test_unknown_table_and_column(owners):
    client = owners["alice_client"]

    assert client.table("comments").select("*").execute().error.code == ERR_UNKNOWN_TABLE
    assert client.table("posts").select("*").eq("author", 1).execute().error.code == ERR_UNKNOWN_COLUMN
