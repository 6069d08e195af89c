"""Shared assertions and request helpers for API contract suites."""

from __future__ import annotations

import uuid

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from crudapp.core.security import hash_password
from crudapp.db.repository.users import create_user

API_PREFIX = "/api/v1"


def assert_uuid(value: str) -> None:
    uuid.UUID(value)


def assert_success_envelope(payload: dict, *, code: int) -> dict | list:
    assert payload["status"] == "success"
    assert payload["code"] == code
    assert isinstance(payload["message"], str) and payload["message"]
    return payload.get("metadata")


def assert_error_envelope(payload: dict, *, code: int) -> None:
    assert payload["status"] == "failed"
    assert payload["code"] == code
    assert isinstance(payload["message"], str) and payload["message"]
    assert "metadata" not in payload

    if "errors" in payload:
        assert isinstance(payload["errors"], list)
        for item in payload["errors"]:
            assert isinstance(item.get("field"), str)
            assert isinstance(item.get("message"), str)


def register(
    test_client: TestClient,
    *,
    username: str = "jane42",
    email: str = "jane@example.com",
    password: str = "Secret123",
    **extra,
) -> dict:
    response = test_client.post(
        f"{API_PREFIX}/auth/register",
        json={"username": username, "email": email, "password": password, **extra},
    )
    assert response.status_code == 201, response.json()
    return assert_success_envelope(response.json(), code=201)["user"]


def login(test_client: TestClient, *, email: str = "jane@example.com", password: str = "Secret123") -> dict:
    response = test_client.post(f"{API_PREFIX}/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.json()
    return assert_success_envelope(response.json(), code=200)


def auth_header(test_client: TestClient, **credentials) -> dict[str, str]:
    tokens = login(test_client, **credentials)["tokens"]
    return {"Authorization": f"Bearer {tokens['access_token']}"}


def seed_admin(
    session_factory: sessionmaker,
    *,
    username: str = "boss",
    email: str = "boss@example.com",
    password: str = "Secret123",
) -> str:
    """Insert an administrator directly; the public API cannot grant the role."""
    with session_factory() as session:
        user = create_user(
            session,
            username=username,
            email=email,
            password_hash=hash_password(password),
            role="admin",
            is_verified=True,
        )
        session.commit()
        return str(user.id)
