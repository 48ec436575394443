# tests/conftest.py

import os

# Settings are read once at import time; point them at a throwaway database first
os.environ["TASKMANAGER_ENVIRONMENT"] = "test"
os.environ["TASKMANAGER_DATABASE_URL"] = "sqlite://"
os.environ["TASKMANAGER_BCRYPT_ROUNDS"] = "4"

import uuid  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from taskmanager.database.database import build_engine, get_session  # noqa: E402
from taskmanager.main import app  # noqa: E402
from taskmanager.models import User, UserCredentials  # noqa: E402
from taskmanager.services.auth_service import AuthService, revoked_tokens  # noqa: E402

from .fakes import FakeDataSource, make_session  # noqa: E402


@pytest.fixture()
def engine():
    """Fresh in-memory SQLite database per test."""
    import taskmanager.models  # noqa: F401

    test_engine = build_engine("sqlite://", echo=False)
    SQLModel.metadata.create_all(test_engine)
    yield test_engine
    SQLModel.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as db:
        yield db


@pytest.fixture(autouse=True)
def _reset_revocations():
    yield
    revoked_tokens.clear()


@pytest.fixture()
def client(engine):
    """TestClient whose requests use the per-test database."""

    def override_get_session():
        with Session(engine) as db:
            yield db

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def signed_up(session):
    """A registered user (profile and default categories included) and their session."""
    user_session, error = AuthService.sign_up(
        session, UserCredentials(email="alice@example.com", password="correct-horse")
    )
    assert error is None
    return user_session


def add_bare_user(db: Session, email: str) -> uuid.UUID:
    """A user row without profile or seeded categories."""
    user = User(email=email, hashed_password="x")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user.id


@pytest.fixture()
def bare_user_id(session) -> uuid.UUID:
    return add_bare_user(session, "bare@example.com")


@pytest.fixture()
def other_user_id(session) -> uuid.UUID:
    return add_bare_user(session, "mallory@example.com")


@pytest.fixture()
def user_session():
    return make_session()


@pytest.fixture()
def data_source() -> FakeDataSource:
    return FakeDataSource()
