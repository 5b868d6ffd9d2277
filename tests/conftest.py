from __future__ import annotations

from datetime import datetime

import pytest

from campus_attendance.main import create_app
from fakes import CampusFixture


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 8, 30, 0)


@pytest.fixture
def campus(fixed_now) -> CampusFixture:
    return CampusFixture(fixed_now)


@pytest.fixture
def seeded(campus) -> dict:
    return campus.seed_campus()


@pytest.fixture
def app(campus, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=campus.container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(email: str, password: str = "Secret@123", remember: bool = False):
        return client.post("/api/login", json={"email": email, "password": password, "rememberMe": remember})

    return _login
