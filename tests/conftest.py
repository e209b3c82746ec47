"""
Pytest fixtures for the Developer Profile API tests.

Every test gets its own SQLite file with all migrations applied.
"""

from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from profile_api.app.core.config import settings
from profile_api.app.core.db import init_db
from profile_api.app.main import create_app


@pytest.fixture
def test_db(tmp_path, monkeypatch) -> str:
    db_path = str(tmp_path / "profiles_test.db")
    monkeypatch.setattr(settings, "database_url", db_path)
    init_db()
    return db_path


@pytest.fixture
def client(test_db) -> Iterator[TestClient]:
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def register(client) -> Callable[..., dict]:
    """Register a user and return Authorization headers for it."""
    counter = {"n": 0}

    def _register(name: str = "Tester", email: str = None, password: str = "secret123") -> dict:
        counter["n"] += 1
        email = email or f"tester{counter['n']}@example.com"
        resp = client.post(
            "/api/v1/users/",
            json={"name": name, "email": email, "password": password},
        )
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    return _register


@pytest.fixture
def auth_headers(register) -> dict:
    return register()
