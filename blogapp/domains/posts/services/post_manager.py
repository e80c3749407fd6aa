"""Dashboard view state: the signed-in user's posts and the edit modal.

The manager keeps an in-memory copy of the user's posts that follows the
session provider. A new session triggers one fetch that replaces the list
wholesale; each successful create/update/delete is applied to the list right
after the backend confirms it.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import ValidationError

from blogapp.backend import BackendClient, Session
from blogapp.backend.query import RETURN_REPRESENTATION
from blogapp.core.auth.session_provider import SessionProvider
from blogapp.domains.posts.schemas.post_schemas import PostCreate
from blogapp.domains.posts.services.post_service import (
    delete_post,
    fetch_posts,
    insert_post,
    update_post,
)

logger = logging.getLogger(__name__)


class DashboardState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    LOADING = "loading"
    LOADED = "loaded"


class ModalMode(str, Enum):
    NONE = "none"
    CREATE = "create"
    EDIT = "edit"


@dataclass
class OperationResult:
    success: bool
    post: Optional[dict] = None
    error: Optional[str] = None


class PostManager:
    def __init__(
        self,
        provider: SessionProvider,
        client: BackendClient,
        *,
        returning: str = RETURN_REPRESENTATION,
    ) -> None:
        self._provider = provider
        self._client = client
        self._returning = returning
        self.posts: list[dict] = []
        self.state = DashboardState.UNAUTHENTICATED
        self.modal = ModalMode.NONE
        self.editing: Optional[dict] = None
        self.fetch_count = 0
        self._loaded_for: Optional[tuple[int, str]] = None
        self._unsubscribe = provider.subscribe(self._on_session_change)
        self._on_session_change(provider.session)

    def close(self) -> None:
        self._unsubscribe()

    @property
    def has_pending(self) -> bool:
        return any(post.get("pending") for post in self.posts)

    # --- loading ---

    def load(self) -> bool:
        """Replace the list with the user's posts from the backend."""
        user_id = self._provider.user_id
        if user_id is None:
            logger.error("User is not authenticated or session is null")
            self.state = DashboardState.UNAUTHENTICATED
            return False
        self.state = DashboardState.LOADING
        self.fetch_count += 1
        response = fetch_posts(self._client, user_id)
        self.state = DashboardState.LOADED
        if response.error:
            logger.error("Error fetching posts: %s", response.error.message)
            return False
        self.posts = list(response.data)
        return True

    def reconcile(self) -> bool:
        """Swap placeholder entries for the stored rows."""
        if not self.has_pending:
            return False
        return self.load()

    # --- modal ---

    def open_create(self) -> None:
        self.modal = ModalMode.CREATE
        self.editing = None

    def open_edit(self, post_id: int) -> bool:
        post = self._find(post_id)
        if post is None:
            return False
        self.modal = ModalMode.EDIT
        self.editing = post
        return True

    def close_modal(self) -> None:
        self.modal = ModalMode.NONE
        self.editing = None

    # --- mutations ---

    def create(self, title: str, content: str) -> OperationResult:
        user_id = self._provider.require_user_id()
        try:
            data = PostCreate(title=title, content=content)
        except ValidationError:
            return OperationResult(success=False, error="validation_error")

        response = insert_post(
            self._client,
            user_id,
            title=data.title,
            content=data.content,
            returning=self._returning,
        )
        if response.error:
            logger.error("Error adding post: %s", response.error.message)
            return OperationResult(success=False, error=response.error.code)

        if response.data:
            post = response.data[0]
        else:
            # Stored id unknown until the next fetch.
            post = {
                "id": int(time.time() * 1000),
                "title": data.title,
                "content": data.content,
                "user_id": user_id,
                "created_at": datetime.now(timezone.utc).isoformat(),
                "pending": True,
            }
        self.posts = [*self.posts, post]
        self.close_modal()
        return OperationResult(success=True, post=post)

    def update(self, post_id: int, title: str, content: str) -> OperationResult:
        user_id = self._provider.require_user_id()
        try:
            data = PostCreate(title=title, content=content)
        except ValidationError:
            return OperationResult(success=False, error="validation_error")

        response = update_post(self._client, user_id, post_id, title=data.title, content=data.content)
        if response.error:
            logger.error("Error updating post: %s", response.error.message)
            return OperationResult(success=False, error=response.error.code)
        if not response.data:
            logger.warning("Post %s not updated: no row owned by user %s", post_id, user_id)
            return OperationResult(success=False, error="not_found")

        self.posts = [
            {**post, "title": data.title, "content": data.content} if post["id"] == post_id else post
            for post in self.posts
        ]
        self.close_modal()
        return OperationResult(success=True, post=self._find(post_id) or response.data[0])

    def delete(self, post_id: int) -> OperationResult:
        user_id = self._provider.require_user_id()
        response = delete_post(self._client, user_id, post_id)
        if response.error:
            logger.error("Error deleting post: %s", response.error.message)
            return OperationResult(success=False, error=response.error.code)
        if not response.data:
            logger.warning("Post %s not deleted: no row owned by user %s", post_id, user_id)
            return OperationResult(success=False, error="not_found")

        self.posts = [post for post in self.posts if post["id"] != post_id]
        return OperationResult(success=True, post=response.data[0])

    # --- internals ---

    def _on_session_change(self, session: Optional[Session]) -> None:
        if session is None:
            self.posts = []
            self.state = DashboardState.UNAUTHENTICATED
            self._loaded_for = None
            self.close_modal()
            return
        key = (session.user.id, session.access_token)
        if key == self._loaded_for:
            return
        self._loaded_for = key
        self.load()

    def _find(self, post_id: int) -> Optional[dict]:
        return next((post for post in self.posts if post["id"] == post_id), None)


__all__ = ["DashboardState", "ModalMode", "OperationResult", "PostManager"]
