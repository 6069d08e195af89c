"""Service helpers for todo API operations."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from crudapp.core.errors import NotFoundError
from crudapp.db.models.todo import Todo
from crudapp.db.repository.todos import create_todo
from crudapp.db.repository.todos import delete_todo
from crudapp.db.repository.todos import get_todo
from crudapp.db.repository.todos import list_todos
from crudapp.db.repository.todos import update_todo
from crudapp.queries.filters import FilterProfile
from crudapp.queries.filters import build_filter
from crudapp.validation.engine import ensure_valid
from crudapp.validation.payloads import TODO_RULES

logger = logging.getLogger(__name__)

TODO_FILTER_PROFILE = FilterProfile(
    exact_fields={"status": str},
    search_param="search",
    search_fields=("title", "description"),
)

_PAYLOAD_COLUMNS = {
    "title": "title",
    "description": "description",
    "status": "status",
    "dueDate": "due_date",
    "createdBy": "created_by",
}


def _to_columns(value: Mapping[str, Any]) -> dict[str, Any]:
    return {_PAYLOAD_COLUMNS[key]: item for key, item in value.items()}


def create_todo_service(session: Session, payload: Any) -> Todo:
    """Validate and persist a new todo."""
    value = ensure_valid(payload, TODO_RULES)
    todo = create_todo(session, **_to_columns(value))
    session.commit()
    logger.info("Created todo id=%s", todo.id)
    return todo


def list_todos_service(session: Session, raw_query: Mapping[str, Any]) -> list[Todo]:
    """List todos filtered by status and free-text search."""
    return list_todos(session, build_filter(raw_query, TODO_FILTER_PROFILE))


def get_todo_service(session: Session, todo_id: UUID) -> Todo:
    """Fetch a todo or raise not found."""
    todo = get_todo(session, todo_id)
    if todo is None:
        raise NotFoundError("Todo not found")
    return todo


def update_todo_service(session: Session, todo_id: UUID, payload: Any) -> Todo:
    """Replace the supplied todo fields; the title stays mandatory."""
    value = ensure_valid(payload, TODO_RULES)
    todo = get_todo_service(session, todo_id)
    todo = update_todo(session, todo, **_to_columns(value))
    session.commit()
    logger.info("Updated todo id=%s fields=%s", todo.id, sorted(value))
    return todo


def delete_todo_service(session: Session, todo_id: UUID) -> None:
    todo = get_todo_service(session, todo_id)
    delete_todo(session, todo)
    session.commit()
    logger.info("Deleted todo id=%s", todo_id)
