# tests/test_auth.py

from __future__ import annotations

from datetime import timedelta

import pytest
from jose import jwt

from task_api.core.config import get_settings
from task_api.core.errors import InvalidCredential
from task_api.core.security import create_access_token, decode_access_token, get_password_hash, verify_password

INVALID = {"error": {"status": 400, "message": "The token is not valid"}}


def test_password_hash_round_trip() -> None:
    hashed = get_password_hash("Password123")

    assert hashed != "Password123"
    assert verify_password("Password123", hashed)
    assert not verify_password("Password124", hashed)


def test_token_carries_identity_and_seven_day_expiry() -> None:
    token = create_access_token("user-1", "alice")

    claims = decode_access_token(token)

    assert claims["sub"] == "user-1"
    assert claims["username"] == "alice"
    assert claims["exp"] - claims["iat"] == int(timedelta(days=7).total_seconds())


def test_expired_token_is_rejected() -> None:
    token = create_access_token("user-1", "alice", expires_delta=timedelta(seconds=-10))

    with pytest.raises(InvalidCredential):
        decode_access_token(token)


def test_token_signed_with_other_secret_is_rejected() -> None:
    token = jwt.encode({"sub": "user-1"}, "not-the-secret", algorithm=get_settings().algorithm)

    with pytest.raises(InvalidCredential):
        decode_access_token(token)


def test_missing_authorization_header(client) -> None:
    response = client.get("/api/projects")

    assert response.status_code == 400
    assert response.json() == INVALID


@pytest.mark.parametrize(
    "header",
    ["Bearer", "Bearer not-a-jwt", "Basic dXNlcjpwYXNz", "Token abc"],
)
def test_malformed_authorization_header(client, header: str) -> None:
    response = client.get("/api/projects", headers={"Authorization": header})

    assert response.status_code == 400
    assert response.json() == INVALID


def test_expired_token_on_request(client, owner) -> None:
    token = create_access_token(owner["_id"], "owner", expires_delta=timedelta(seconds=-10))

    response = client.get("/api/projects", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 400
    assert response.json() == INVALID


def test_token_without_subject_is_rejected(client) -> None:
    settings = get_settings()
    token = jwt.encode({"username": "ghost"}, settings.secret_key, algorithm=settings.algorithm)

    response = client.get("/api/projects", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 400
    assert response.json() == INVALID


def test_guard_runs_before_body_validation(client) -> None:
    response = client.post("/api/projects", json={})

    assert response.status_code == 400
    assert response.json() == INVALID
