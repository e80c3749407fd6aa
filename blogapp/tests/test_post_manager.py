"""Post manager: per-user list, mutations and placeholder reconciliation."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

from blogapp.backend import MemoryStorage, create_client
from blogapp.backend.query import RETURN_MINIMAL
from blogapp.core.auth.session_provider import AuthRequiredError, SessionProvider
from blogapp.domains.posts.models import Post
from blogapp.domains.posts.services.post_manager import DashboardState, ModalMode, PostManager


def _signed_in(email: str):
    client = create_client(MemoryStorage())
    provider = SessionProvider(client.auth).initialize()
    result = provider.sign_in(email, "secret123")
    assert result.success, result.error
    return provider, client


@pytest.fixture
def alice(make_user):
    user = make_user("alice@example.com")
    provider, client = _signed_in("alice@example.com")
    yield user, provider, client
    provider.close()


@pytest.fixture
def bob(make_user):
    user = make_user("bob@example.com")
    provider, client = _signed_in("bob@example.com")
    yield user, provider, client
    provider.close()


def test_without_session_list_is_empty(provider, backend):
    manager = PostManager(provider, backend)

    assert manager.state == DashboardState.UNAUTHENTICATED
    assert manager.posts == []
    assert manager.fetch_count == 0
    assert manager.load() is False


def test_mutations_without_session_raise(provider, backend):
    manager = PostManager(provider, backend)

    with pytest.raises(AuthRequiredError):
        manager.create("t", "c")
    with pytest.raises(AuthRequiredError):
        manager.update(1, "t", "c")
    with pytest.raises(AuthRequiredError):
        manager.delete(1)
    assert Post.query.count() == 0


def test_sign_in_triggers_single_fetch(provider, backend, make_user):
    make_user("fetch@example.com")
    manager = PostManager(provider, backend)

    provider.sign_in("fetch@example.com", "secret123")

    assert manager.state == DashboardState.LOADED
    assert manager.fetch_count == 1
    # Re-announcing the same session does not refetch.
    backend.auth.get_session()
    manager._on_session_change(provider.session)
    assert manager.fetch_count == 1


def test_sign_out_clears_list(alice):
    user, provider, client = alice
    manager = PostManager(provider, client)
    manager.create("Hello", "World")

    provider.sign_out()

    assert manager.posts == []
    assert manager.state == DashboardState.UNAUTHENTICATED


def test_create_appends_stored_row(alice):
    user, provider, client = alice
    manager = PostManager(provider, client)
    manager.open_create()

    result = manager.create("  Hello ", "World")

    assert result.success is True
    stored = Post.query.one()
    assert manager.posts == [result.post]
    assert result.post["id"] == stored.id
    assert result.post["user_id"] == user.id
    assert result.post["title"] == "Hello"
    assert manager.modal == ModalMode.NONE


@pytest.mark.parametrize("title,content", [("", "body"), ("title", "   ")])
def test_create_rejects_blank_fields(alice, title, content):
    _, provider, client = alice
    manager = PostManager(provider, client)

    result = manager.create(title, content)

    assert result.success is False
    assert result.error == "validation_error"
    assert manager.posts == []
    assert Post.query.count() == 0


def test_create_without_returned_row_uses_placeholder(alice):
    user, provider, client = alice
    manager = PostManager(provider, client, returning=RETURN_MINIMAL)

    result = manager.create("Draft", "Text")

    assert result.success is True
    assert result.post["pending"] is True
    assert result.post["created_at"].endswith("+00:00")
    assert manager.has_pending is True
    assert manager.reconcile() is True
    assert manager.has_pending is False
    assert [post["id"] for post in manager.posts] == [Post.query.one().id]
    assert manager.reconcile() is False


def test_update_replaces_fields_and_keeps_others(alice):
    _, provider, client = alice
    manager = PostManager(provider, client)
    created = manager.create("Old", "Body").post
    assert manager.open_edit(created["id"]) is True

    result = manager.update(created["id"], "New", "Changed")

    assert result.success is True
    assert manager.posts[0]["title"] == "New"
    assert manager.posts[0]["content"] == "Changed"
    assert manager.posts[0]["created_at"] == created["created_at"]
    assert manager.modal == ModalMode.NONE
    assert Post.query.one().title == "New"


def test_lists_are_isolated_between_users(alice, bob):
    alice_user, alice_provider, alice_client = alice
    _, bob_provider, bob_client = bob
    created = PostManager(alice_provider, alice_client).create("Mine", "Only mine").post

    alice_view = PostManager(alice_provider, alice_client)
    bob_view = PostManager(bob_provider, bob_client)

    assert [post["user_id"] for post in alice_view.posts] == [alice_user.id]
    assert bob_view.posts == []
    assert bob_view.update(created["id"], "x", "y").error == "not_found"


def test_delete_forged_id_leaves_list_unchanged(alice, bob):
    _, alice_provider, alice_client = alice
    _, bob_provider, bob_client = bob
    alices_post = PostManager(alice_provider, alice_client).create("Keep", "me").post
    bob_manager = PostManager(bob_provider, bob_client)
    bobs_post = bob_manager.create("Bob", "post").post

    result = bob_manager.delete(alices_post["id"])

    assert result.success is False
    assert result.error == "not_found"
    assert bob_manager.posts == [bobs_post]
    assert Post.query.count() == 2


def test_delete_removes_entry(alice):
    _, provider, client = alice
    manager = PostManager(provider, client)
    first = manager.create("First", "a").post
    second = manager.create("Second", "b").post

    result = manager.delete(first["id"])

    assert result.success is True
    assert manager.posts == [second]


def test_open_edit_unknown_post(alice):
    _, provider, client = alice
    manager = PostManager(provider, client)

    assert manager.open_edit(999) is False
    assert manager.modal == ModalMode.NONE
