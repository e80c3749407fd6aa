import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from blogapp import create_app
from blogapp.backend import MemoryStorage, create_client
from blogapp.core.auth import models as auth_models  # noqa: F401
from blogapp.core.auth.session_provider import SessionProvider
from blogapp.core.users.services import create_user
from blogapp.domains.posts.models import post as post_models  # noqa: F401
from blogapp.extensions import db


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")
    config.addinivalue_line("markers", "slow: Slow running tests")
    config.addinivalue_line("markers", "smoke: Quick smoke tests for CI")


@pytest.fixture()
def app():
    """Per-test app on a fresh in-memory database."""
    app = create_app("testing")
    ctx = app.app_context()
    ctx.push()
    db.create_all()
    try:
        yield app
    finally:
        db.session.remove()
        db.drop_all()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_user(app):
    """Factory creating an account with a known password."""

    def _make(email: str, password: str = "secret123"):
        return create_user(email, password)

    return _make


@pytest.fixture()
def backend(app):
    return create_client(MemoryStorage())


@pytest.fixture()
def provider(backend):
    provider = SessionProvider(backend.auth).initialize()
    yield provider
    provider.close()


@pytest.fixture()
def signed_in_client(app):
    """Factory returning a backend client holding a fresh session for an existing account."""

    def _sign_in(email: str, password: str = "secret123"):
        client = create_client(MemoryStorage())
        response = client.auth.sign_in_with_password(email, password)
        assert response.error is None, response.error
        return client

    return _sign_in
