"""Dashboard HTML pages: list, create, edit and delete posts."""

from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, request, url_for

from blogapp.core.auth.context import get_backend, get_session_provider
from blogapp.core.utils.decorators import csrf_protected, session_required
from blogapp.domains.posts.services.post_manager import ModalMode, PostManager

dashboard_pages_bp = Blueprint("dashboard_pages", __name__)


def _manager() -> PostManager:
    return PostManager(get_session_provider(), get_backend())


def _back_to_dashboard():
    return redirect(url_for("dashboard_pages.dashboard"))


@dashboard_pages_bp.get("")
@session_required
def dashboard():
    manager = _manager()
    edit_id = request.args.get("edit", type=int)
    if edit_id is not None:
        manager.open_edit(edit_id)
    elif request.args.get("modal") == ModalMode.CREATE.value:
        manager.open_create()
    return render_template("dashboard/index.html", manager=manager, posts=manager.posts, modes=ModalMode)


@dashboard_pages_bp.post("/posts")
@session_required
@csrf_protected
def create_post():
    result = _manager().create(request.form.get("title", ""), request.form.get("content", ""))
    if result.success:
        flash("Post added successfully", "success")
    return _back_to_dashboard()


@dashboard_pages_bp.post("/posts/<int:post_id>/edit")
@session_required
@csrf_protected
def update_post(post_id: int):
    result = _manager().update(post_id, request.form.get("title", ""), request.form.get("content", ""))
    if result.success:
        flash("Post updated successfully", "success")
    return _back_to_dashboard()


@dashboard_pages_bp.post("/posts/<int:post_id>/delete")
@session_required
@csrf_protected
def delete_post(post_id: int):
    result = _manager().delete(post_id)
    if result.success:
        flash("Post deleted successfully", "success")
    return _back_to_dashboard()
