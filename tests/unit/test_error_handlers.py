"""Unit tests for the error taxonomy and shared envelope handlers."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from crudapp.core.errors import APIError
from crudapp.core.errors import BadRequestError
from crudapp.core.errors import ConflictError
from crudapp.core.errors import ForbiddenError
from crudapp.core.errors import InternalServerError
from crudapp.core.errors import NotFoundError
from crudapp.core.errors import UnauthorizedError
from crudapp.core.errors import register_error_handlers
from crudapp.schemas.envelope import ErrorDetail


def _build_client() -> TestClient:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/query")
    def query(limit: int) -> dict[str, int]:
        return {"limit": limit}

    @app.get("/not-found")
    def not_found() -> None:
        raise NotFoundError("Post not found")

    @app.get("/domain")
    def domain_error() -> None:
        raise BadRequestError(
            "Invalid todo payload",
            details=[ErrorDetail(field="status", message="Unsupported value")],
        )

    @app.get("/boom")
    def boom() -> None:
        raise RuntimeError("connection string postgres://secret@db leaked")

    return TestClient(app, raise_server_exceptions=False)


@pytest.mark.parametrize(
    ("error_class", "status_code", "code"),
    [
        (BadRequestError, 400, "bad_request"),
        (UnauthorizedError, 401, "unauthorized"),
        (ForbiddenError, 403, "forbidden"),
        (NotFoundError, 404, "not_found"),
        (ConflictError, 409, "conflict"),
        (InternalServerError, 500, "internal_error"),
    ],
)
def test_taxonomy_status_codes(error_class: type[APIError], status_code: int, code: str) -> None:
    error = error_class("message")

    assert isinstance(error, APIError)
    assert error.status_code == status_code
    assert error.code == code
    assert error.message == "message"


def test_default_messages_are_used_when_none_given() -> None:
    assert ForbiddenError().message == "You are not authorized to access this resource."
    assert InternalServerError().message == "Internal server error"


def test_request_validation_errors_are_normalized_to_envelope() -> None:
    client = _build_client()

    response = client.get("/query")

    assert response.status_code == 400
    payload = response.json()
    assert payload["status"] == "failed"
    assert payload["code"] == 400
    assert payload["message"] == "Request validation failed"
    assert payload["errors"][0]["field"] == "limit"


def test_domain_errors_use_shared_envelope() -> None:
    client = _build_client()

    response = client.get("/domain")

    assert response.status_code == 400
    assert response.json() == {
        "status": "failed",
        "code": 400,
        "message": "Invalid todo payload",
        "errors": [{"field": "status", "message": "Unsupported value"}],
    }


def test_not_found_errors_render_message_exactly() -> None:
    client = _build_client()

    response = client.get("/not-found")

    assert response.status_code == 404
    assert response.json() == {"status": "failed", "code": 404, "message": "Post not found"}


def test_unknown_routes_are_wrapped_in_shared_envelope() -> None:
    client = _build_client()

    response = client.get("/missing")

    assert response.status_code == 404
    assert response.json()["status"] == "failed"
    assert response.json()["code"] == 404


def test_unhandled_exceptions_do_not_leak_details(caplog: pytest.LogCaptureFixture) -> None:
    client = _build_client()

    with caplog.at_level("ERROR", logger="crudapp.core.errors"):
        response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"status": "failed", "code": 500, "message": "Internal server error"}
    assert "Unhandled exception on GET /boom" in caplog.text
