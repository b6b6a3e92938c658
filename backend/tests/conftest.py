"""
Shared test fixtures.

Every test gets a fresh application wired to an in-memory repository and
session store. Each simulated user gets their own TestClient so session
cookies never leak between users.
"""

from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

from skillswap.auth.sessions import MemorySessionStore
from skillswap.main import create_app
from skillswap.repository import InMemoryRepository

from helpers import user_payload


# ============ App Fixtures ============

@pytest.fixture
def repository() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def session_store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def app(repository, session_store):
    return create_app(repository=repository, session_store=session_store)


@pytest.fixture
def client(app) -> TestClient:
    """Anonymous client"""
    return TestClient(app)


@pytest.fixture
def login_as(app) -> Callable[..., TestClient]:
    """Register ``username`` and return a client holding their session"""

    def _login_as(username: str, **overrides: Any) -> TestClient:
        user_client = TestClient(app)
        response = user_client.post("/api/register", json=user_payload(username, **overrides))
        assert response.status_code == 201, response.text
        user_client.user = response.json()
        return user_client

    return _login_as


@pytest.fixture
def login_admin(app, repository, login_as) -> Callable[[str], TestClient]:
    """Register a user and promote them to admin"""

    def _login_admin(username: str = "admin") -> TestClient:
        admin_client = login_as(username)
        repository.update_user(admin_client.user["id"], {"is_admin": True})
        admin_client.user["isAdmin"] = True
        return admin_client

    return _login_admin
