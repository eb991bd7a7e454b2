"""
Pytest configuration and shared fixtures.

Environment variables are set before the app is imported: settings are
read once at import time and JWT_SECRET is mandatory. Every test gets its
own SQLite file database; Redis and Kafka are disabled.
"""

import os

os.environ["JWT_SECRET"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CACHE_ENABLED"] = "false"
os.environ["KAFKA_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import date, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session  # noqa: E402

from app.core.database import build_engine, create_db_and_tables, get_session  # noqa: E402
from app.core.security import TokenData, create_access_token, hash_password  # noqa: E402
from app.main import app  # noqa: E402
from app.models.user import User  # noqa: E402


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'leaves.db'}")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(engine):
    """Factory creating committed accounts in their own short session."""

    def _make_user(name: str, role: str = "user", password: str = "pw123") -> User:
        with Session(engine, expire_on_commit=False) as session:
            user = User(name=name, password_hash=hash_password(password), role=role)
            session.add(user)
            session.commit()
            return user

    return _make_user


def identity(user: User) -> TokenData:
    return TokenData(id=user.id, role=user.role)


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


def days_from_today(days: int) -> str:
    return (date.today() + timedelta(days=days)).isoformat()
