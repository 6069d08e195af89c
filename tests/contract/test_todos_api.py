"""Contract tests for todo endpoints."""

from __future__ import annotations

import uuid

from fastapi.testclient import TestClient

from tests.contract.helpers import API_PREFIX
from tests.contract.helpers import assert_error_envelope
from tests.contract.helpers import assert_success_envelope
from tests.contract.helpers import assert_uuid


def _create_todo(test_client: TestClient, **fields) -> dict:
    response = test_client.post(f"{API_PREFIX}/todos", json={"title": "Buy groceries", **fields})
    assert response.status_code == 201, response.json()
    return assert_success_envelope(response.json(), code=201)


def test_todos_crud_contract(client: TestClient) -> None:
    created = _create_todo(client, description="milk, eggs", dueDate="2026-03-01T10:00:00Z", createdBy=" jane ")
    assert_uuid(created["id"])
    assert created["status"] == "pending"
    assert created["created_by"] == "jane"
    assert created["due_date"].startswith("2026-03-01T10:00:00")

    response = client.get(f"{API_PREFIX}/todos/{created['id']}")
    assert response.status_code == 200
    assert assert_success_envelope(response.json(), code=200)["title"] == "Buy groceries"

    response = client.put(f"{API_PREFIX}/todos/{created['id']}", json={"title": "Buy groceries", "status": "completed"})
    assert response.status_code == 200
    updated = assert_success_envelope(response.json(), code=200)
    assert updated["status"] == "completed"
    assert updated["description"] == "milk, eggs"

    response = client.delete(f"{API_PREFIX}/todos/{created['id']}")
    assert response.status_code == 200
    assert assert_success_envelope(response.json(), code=200) == {"message": "Todo deleted successfully"}

    response = client.delete(f"{API_PREFIX}/todos/{created['id']}")
    assert response.status_code == 404
    assert response.json()["message"] == "Todo not found"


def test_create_todo_validation_errors(client: TestClient) -> None:
    response = client.post(
        f"{API_PREFIX}/todos",
        json={"title": "  ", "status": "done", "dueDate": "someday"},
    )

    assert response.status_code == 400
    payload = response.json()
    assert_error_envelope(payload, code=400)
    assert payload["errors"] == [
        {"field": "title", "message": "Title cannot be empty"},
        {"field": "status", "message": "Status must be either pending, in_progress or completed"},
        {"field": "dueDate", "message": "Due date must be a valid date"},
    ]


def test_create_todo_rejects_non_object_body(client: TestClient) -> None:
    response = client.post(f"{API_PREFIX}/todos", json=["Buy groceries"])

    assert response.status_code == 400
    assert_error_envelope(response.json(), code=400)


def test_update_unknown_todo_is_not_found(client: TestClient) -> None:
    response = client.put(f"{API_PREFIX}/todos/{uuid.uuid4()}", json={"title": "Anything"})

    assert response.status_code == 404
    assert_error_envelope(response.json(), code=404)


def test_list_todos_by_status_and_search(client: TestClient) -> None:
    _create_todo(client, title="Groceries", status="completed")
    _create_todo(client, title="Errands", description="pick up groceries", status="completed")
    _create_todo(client, title="Groceries again")

    response = client.get(f"{API_PREFIX}/todos", params={"status": "completed", "search": "GROCERIES"})

    assert response.status_code == 200
    titles = {todo["title"] for todo in assert_success_envelope(response.json(), code=200)}
    assert titles == {"Groceries", "Errands"}


def test_list_todos_empty_result_is_success(client: TestClient) -> None:
    response = client.get(f"{API_PREFIX}/todos")

    assert response.status_code == 200
    assert assert_success_envelope(response.json(), code=200) == []


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_create_todo_rejects_overlong_created_by(client: TestClient) -> None:
    response = client.post(f"{API_PREFIX}/todos", json={"title": "Buy milk", "createdBy": "x" * 65})

    assert response.status_code == 400
    assert_error_envelope(response.json(), code=400)
    assert response.json()["message"] == "Created by must not exceed 64 characters"
