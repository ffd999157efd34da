import os
import tempfile
from pathlib import Path

# Point the app at a throwaway database before anything imports it.
_DB_FD, _DB_NAME = tempfile.mkstemp(prefix="japword_test_", suffix=".db")
os.close(_DB_FD)
_DB_PATH = Path(_DB_NAME)
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_PATH}"
os.environ.setdefault("ENV", "dev")
os.environ.setdefault("IMGBB_API_KEY", "test-key")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session

from app.main import app
from app import models
from app.auth import create_token, hash_password
from app.database import engine


@pytest.fixture(autouse=True)
def reset_db():
    """Give every test empty collections."""
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield


@pytest.fixture
def db():
    with Session(engine) as session:
        yield session


@pytest.fixture
def make_user(db):
    """Factory storing a user and returning `(user, token)`."""
    def _make(email="standard@example.com", role=models.ROLE_STANDARD, name="Standard User", password="secret123"):
        user = models.User(
            name=name,
            email=email,
            role=role,
            password_hash=hash_password(password),
            photo_url="https://i.ibb.co/photo.png",
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user, create_token(user)
    return _make


@pytest.fixture
def anon_client():
    return TestClient(app)


@pytest.fixture
def admin_client(make_user):
    _, token = make_user(email="admin@example.com", role=models.ROLE_ADMIN, name="Admin")
    return TestClient(app, cookies={"token": token})


@pytest.fixture
def user_client(make_user):
    _, token = make_user()
    return TestClient(app, cookies={"token": token})


@pytest.fixture(scope="session", autouse=True)
def remove_test_db():
    yield
    engine.dispose()
    _DB_PATH.unlink(missing_ok=True)
