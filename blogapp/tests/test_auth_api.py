"""Auth JSON endpoints."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

from blogapp.core.auth.models import SessionToken


def _login(client, email="api@example.com", password="secret123"):
    return client.post("/auth/login", json={"email": email, "password": password})


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_signup_returns_user_without_tokens(client):
    resp = client.post("/auth/signup", json={"email": "new@example.com", "password": "secret1"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["ok"] is True
    assert body["user"]["email"] == "new@example.com"
    assert "access_token" not in body


def test_signup_validation_error(client):
    resp = client.post("/auth/signup", json={"email": "new@example.com", "password": "123"})

    assert resp.status_code == 422
    assert resp.get_json() == {
        "ok": False,
        "error": "validation_failed",
        "message": "Password should be at least 6 characters",
    }


def test_signup_with_auto_login_returns_tokens(app, client):
    app.config["AUTO_LOGIN_ON_SIGNUP"] = True

    body = client.post("/auth/signup", json={"email": "auto@example.com", "password": "secret1"}).get_json()

    assert body["access_token"]
    assert body["refresh_token"]
    assert body["csrf_token"]


def test_login_clears_stale_flask_session(client, make_user):
    make_user("api@example.com")
    with client.session_transaction() as sess:
        sess["stale"] = "1"

    resp = _login(client)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["ok"] is True
    assert body["token_type"] == "bearer"
    assert body["user"]["email"] == "api@example.com"
    with client.session_transaction() as sess:
        assert "stale" not in sess


def test_login_with_bad_password(client, make_user):
    make_user("api@example.com")

    resp = _login(client, password="not-it")

    assert resp.status_code == 401
    assert resp.get_json()["error"] == "invalid_credentials"


def test_login_with_overlong_password(client, make_user):
    make_user("api@example.com")

    resp = _login(client, password="x" * 100)

    assert resp.status_code == 401
    assert resp.get_json()["error"] == "invalid_credentials"


def test_session_endpoint_requires_token(client):
    resp = client.get("/auth/session")

    assert resp.status_code == 401
    assert resp.get_json() == {"ok": False, "error": "unauthorized"}


def test_session_refresh_and_logout(client, make_user):
    user = make_user("api@example.com")
    tokens = _login(client).get_json()

    current = client.get("/auth/session", headers=_bearer(tokens["access_token"]))
    assert current.status_code == 200
    assert current.get_json()["user"]["id"] == user.id

    refreshed = client.post("/auth/refresh", headers=_bearer(tokens["refresh_token"]))
    assert refreshed.status_code == 200
    new_access = refreshed.get_json()["access_token"]
    assert new_access != tokens["access_token"]

    logout = client.post("/auth/logout", headers=_bearer(new_access))
    assert logout.status_code == 200
    assert SessionToken.query.filter_by(user_id=user.id).one().revoked is True

    # Every token of the session is dead now, including the first access token.
    assert client.get("/auth/session", headers=_bearer(tokens["access_token"])).status_code == 401
    assert client.post("/auth/refresh", headers=_bearer(tokens["refresh_token"])).status_code == 401


def test_logout_requires_csrf_when_enabled(app, client, make_user):
    make_user("api@example.com")
    tokens = _login(client).get_json()
    app.config["WTF_CSRF_ENABLED"] = True

    missing = client.post("/auth/logout", headers=_bearer(tokens["access_token"]))
    assert missing.status_code == 403
    assert missing.get_json()["error"] == "csrf_failed"

    ok = client.post(
        "/auth/logout",
        headers={**_bearer(tokens["access_token"]), "X-CSRF-Token": tokens["csrf_token"]},
    )
    assert ok.status_code == 200


def test_health(client):
    assert client.get("/health").get_json() == {"ok": True}
