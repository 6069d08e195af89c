"""Todo API routes."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from fastapi import APIRouter
from fastapi import Body
from fastapi import Depends
from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from crudapp.core.responses import created
from crudapp.core.responses import ok
from crudapp.core.responses import render
from crudapp.db.base import get_db_session
from crudapp.schemas.envelope import MessageResult
from crudapp.schemas.todo import Todo
from crudapp.services.todos import create_todo_service
from crudapp.services.todos import delete_todo_service
from crudapp.services.todos import get_todo_service
from crudapp.services.todos import list_todos_service
from crudapp.services.todos import update_todo_service

router = APIRouter(prefix="/api/v1", tags=["todos"])


@router.post("/todos", status_code=201)
def create_todo_endpoint(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Create a todo."""
    todo = create_todo_service(session, payload)
    return render(created("Create todo successfully", Todo.model_validate(todo)))


@router.get("/todos")
def list_todos_endpoint(
    request: Request,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """List todos with status filter and free-text search."""
    todos = list_todos_service(session, request.query_params)
    return render(ok("Get all todos successfully", [Todo.model_validate(todo) for todo in todos]))


@router.get("/todos/{todo_id}")
def get_todo_endpoint(
    todo_id: UUID,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    todo = get_todo_service(session, todo_id)
    return render(ok("Get todo successfully", Todo.model_validate(todo)))


@router.put("/todos/{todo_id}")
def update_todo_endpoint(
    todo_id: UUID,
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    todo = update_todo_service(session, todo_id, payload)
    return render(ok("Update todo successfully", Todo.model_validate(todo)))


@router.delete("/todos/{todo_id}")
def delete_todo_endpoint(
    todo_id: UUID,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    delete_todo_service(session, todo_id)
    return render(ok("Delete todo successfully", MessageResult(message="Todo deleted successfully")))
