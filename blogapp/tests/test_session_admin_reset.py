"""Tests for operator-driven session reset (CLI/service path)."""

from __future__ import annotations

import pytest

from blogapp.core.auth.models import JWTBlocklist, SessionToken
from blogapp.core.auth.session_services import SessionLifecycleService
from blogapp.extensions import db

pytestmark = pytest.mark.integration


def test_admin_reset_revokes_all_sessions(make_user, signed_in_client):
    user = make_user("reset@example.com")
    first = signed_in_client("reset@example.com")
    signed_in_client("reset@example.com")

    service = SessionLifecycleService()
    assert service.live_session_count(user.id) == 2
    result = service.admin_reset(user.id, reason="ops reset")

    assert result["reset_count"] == 2
    assert service.live_session_count(user.id) == 0
    assert JWTBlocklist.query.count() == 2
    assert first.auth.get_session().session is None


def test_admin_reset_single_session(make_user, signed_in_client):
    user = make_user("single@example.com")
    keep = signed_in_client("single@example.com")
    drop = signed_in_client("single@example.com")
    jti = SessionToken.query.filter_by(user_id=user.id).order_by(SessionToken.id.desc()).first().jti

    result = SessionLifecycleService().admin_reset(user.id, session_id=jti, reason="one device")

    assert result["reset_count"] == 1
    assert keep.auth.get_session().session is not None
    assert drop.auth.get_session().session is None


def test_admin_reset_is_idempotent(make_user, signed_in_client):
    user = make_user("again@example.com")
    signed_in_client("again@example.com")
    service = SessionLifecycleService()

    service.admin_reset(user.id, reason="first")
    result = service.admin_reset(user.id, reason="second")

    assert result["reset_count"] == 0


def test_admin_reset_requires_reason(make_user):
    user = make_user("reason@example.com")

    with pytest.raises(ValueError):
        SessionLifecycleService().admin_reset(user.id, reason="  ")


def test_admin_reset_unknown_user(app):
    with pytest.raises(ValueError, match="not_found"):
        SessionLifecycleService().admin_reset(4242, reason="typo")


def test_admin_reset_cli_by_email(app, make_user, signed_in_client):
    user = make_user("cli@example.com")
    signed_in_client("cli@example.com")

    result = app.test_cli_runner().invoke(
        args=["admin-reset-sessions", "--email", "CLI@example.com", "--reason", "stolen phone"]
    )

    assert result.exit_code == 0, result.output
    assert f"user_id={user.id} reset_count=1" in result.output
    assert "live_sessions=0" in result.output
    db.session.expire_all()
    assert SessionToken.query.filter_by(user_id=user.id).one().revoked is True


def test_admin_reset_cli_needs_target(app):
    result = app.test_cli_runner().invoke(args=["admin-reset-sessions", "--reason", "x"])

    assert result.exit_code != 0
    assert "Provide --user-id or --email" in result.output
