import os
from typing import Dict, Generator

# precisa rodar antes de qualquer import de todo_api (settings/engine são criados no import)
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["AUTO_MIGRATE"] = "false"
os.environ["SECRET_KEY"] = "test-access-secret"
os.environ["REFRESH_SECRET_KEY"] = "test-refresh-secret"
os.environ["RATE_LIMIT_MAX"] = "100000"
os.environ["AUTH_RATE_LIMIT_MAX"] = "100000"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from todo_api.core import tokens
from todo_api.core.config import settings
from todo_api.crud.user import user_crud
from todo_api.db.base import Base
from todo_api.db.session import SessionLocal, engine
from todo_api.main import api
from todo_api.models.todo import Todo
from todo_api.models.user import User
from todo_api.schemas.user import UserCreate

API = settings.API_PREFIX


@pytest.fixture(autouse=True)
def _schema() -> Generator[None, None, None]:
    """
    Fresh schema and an empty refresh-token set around every test.
    """
    Base.metadata.create_all(bind=engine)
    tokens.refresh_tokens.clear()
    yield
    tokens.refresh_tokens.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client() -> TestClient:
    """In-process client; startup hooks (migrations) are not triggered."""
    return TestClient(api)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db: Session) -> User:
    return user_crud.create(db, UserCreate(name="Alice", email="alice@example.com", password="secret1"))


def register(client: TestClient, name: str = "A", email: str = "a@x.com", password: str = "secret1"):
    return client.post(f"{API}/register", json={"name": name, "email": email, "password": password})


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(client: TestClient) -> Dict[str, str]:
    res = register(client, name="Owner", email="owner@example.com")
    assert res.status_code == 201
    return bearer(res.json()["token"])


@pytest.fixture
def other_headers(client: TestClient) -> Dict[str, str]:
    res = register(client, name="Intruder", email="intruder@example.com")
    assert res.status_code == 201
    return bearer(res.json()["token"])


def count_todos() -> int:
    with SessionLocal() as s:
        return s.scalar(select(func.count()).select_from(Todo)) or 0


def load_todo(todo_id: int) -> Todo | None:
    with SessionLocal() as s:
        todo = s.get(Todo, todo_id)
        if todo is not None:
            s.expunge(todo)
        return todo
