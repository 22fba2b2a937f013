import sys
from pathlib import Path

import pytest
from flask_jwt_extended import create_access_token

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from habitos import create_app
from habitos.core.auth.password import hash_password
from habitos.core.users.models import User
from habitos.extensions import db


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")


@pytest.fixture()
def app():
    """
    Create a per-test app on a fresh in-memory database.

    The schema comes from the models; the migration chain has its own test.
    """
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


def _create_user(username: str, email: str) -> User:
    user = User(
        username=username,
        email=email,
        password_hash=hash_password("secret123"),
        timezone="UTC",
    )
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture()
def test_user(app):
    return _create_user("tester", "tester@example.com")


@pytest.fixture()
def other_user(app):
    return _create_user("someone-else", "other@example.com")


@pytest.fixture()
def auth_headers(test_user):
    token = create_access_token(identity=str(test_user.id))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_headers(other_user):
    token = create_access_token(identity=str(other_user.id))
    return {"Authorization": f"Bearer {token}"}
