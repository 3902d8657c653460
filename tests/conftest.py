# tests/conftest.py

from __future__ import annotations

from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

from task_api.core.database import Database
from task_api.main import create_app

from .helpers import PASSWORD, auth


@pytest.fixture()
def database() -> Database:
    """Fresh in-memory store per test."""
    return Database("sqlite://")


@pytest.fixture()
def client(database: Database):
    app = create_app(database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def register(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Register a user and return the response body (includes the token)."""

    def _register(username: str = "testuser", email: str | None = None, password: str = PASSWORD) -> dict[str, Any]:
        response = client.post(
            "/api/user/register",
            json={"username": username, "email": email or f"{username}@example.com", "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture()
def owner(register) -> dict[str, Any]:
    return register("owner")


@pytest.fixture()
def intruder(register) -> dict[str, Any]:
    return register("intruder")


@pytest.fixture()
def create_project(client: TestClient) -> Callable[..., dict[str, Any]]:
    def _create(user: dict[str, Any], name: str = "Test Project", description: str | None = "A description") -> dict[str, Any]:
        response = client.post("/api/projects", json={"name": name, "description": description}, headers=auth(user))
        assert response.status_code == 201, response.text
        return response.json()["project"]

    return _create


@pytest.fixture()
def project(owner, create_project) -> dict[str, Any]:
    return create_project(owner)


@pytest.fixture()
def create_task(client: TestClient) -> Callable[..., dict[str, Any]]:
    def _create(user: dict[str, Any], project_id: str, title: str = "Test Task", **fields: Any) -> dict[str, Any]:
        body = {"title": title, "status": "pending", **fields}
        response = client.post(f"/api/projects/{project_id}/tasks", json=body, headers=auth(user))
        assert response.status_code == 201, response.text
        return response.json()["task"]

    return _create
