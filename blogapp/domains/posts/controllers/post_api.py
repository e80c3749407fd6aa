"""Posts JSON API."""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from blogapp.backend import APIError
from blogapp.backend.constants import ERR_NOT_AUTHENTICATED, ERR_RLS
from blogapp.core.auth.context import get_bearer_backend
from blogapp.core.utils.decorators import csrf_protected
from blogapp.core.utils.validation import jsonable_errors
from blogapp.domains.posts.mappers import map_post
from blogapp.domains.posts.schemas.post_schemas import PostCreate, PostUpdate
from blogapp.domains.posts.services import post_service

logger = logging.getLogger(__name__)

posts_api_bp = Blueprint("posts_api", __name__)

_ERROR_STATUS = {ERR_NOT_AUTHENTICATED: 401, ERR_RLS: 403}


def _backend_error(error: APIError):
    logger.error("Backend rejected posts request: %s (%s)", error.message, error.code)
    return jsonify({"ok": False, "error": error.code}), _ERROR_STATUS.get(error.code, 500)


def _not_found():
    return jsonify({"ok": False, "error": "not_found"}), 404


@posts_api_bp.get("")
@jwt_required()
def list_posts():
    user_id = int(get_jwt_identity())
    response = post_service.fetch_posts(get_bearer_backend(), user_id)
    if response.error:
        return _backend_error(response.error)
    return jsonify({"ok": True, "items": [map_post(row) for row in response.data], "total": len(response.data)})


@posts_api_bp.get("/<int:post_id>")
@jwt_required()
def get_post(post_id: int):
    user_id = int(get_jwt_identity())
    response = post_service.fetch_post(get_bearer_backend(), user_id, post_id)
    if response.error:
        return _backend_error(response.error)
    if not response.data:
        return _not_found()
    return jsonify({"ok": True, "post": map_post(response.data[0])})


@posts_api_bp.post("")
@jwt_required()
@csrf_protected
def create_post():
    payload = request.get_json(silent=True) or {}
    try:
        data = PostCreate.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    user_id = int(get_jwt_identity())
    response = post_service.insert_post(get_bearer_backend(), user_id, title=data.title, content=data.content)
    if response.error:
        return _backend_error(response.error)
    return jsonify({"ok": True, "post": map_post(response.data[0])}), 201


@posts_api_bp.patch("/<int:post_id>")
@jwt_required()
@csrf_protected
def update_post(post_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = PostUpdate.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    user_id = int(get_jwt_identity())
    response = post_service.update_post(
        get_bearer_backend(),
        user_id,
        post_id,
        title=data.title,
        content=data.content,
    )
    if response.error:
        return _backend_error(response.error)
    if not response.data:
        return _not_found()
    return jsonify({"ok": True, "post": map_post(response.data[0])})


@posts_api_bp.delete("/<int:post_id>")
@jwt_required()
@csrf_protected
def delete_post(post_id: int):
    user_id = int(get_jwt_identity())
    response = post_service.delete_post(get_bearer_backend(), user_id, post_id)
    if response.error:
        return _backend_error(response.error)
    if not response.data:
        return _not_found()
    return jsonify({"ok": True})
