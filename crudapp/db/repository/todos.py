"""Repository primitives for todo entities."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from crudapp.db.models.todo import Todo
from crudapp.db.repository.querying import apply_filter
from crudapp.queries.filters import FilterDescriptor

UNSET = object()


def create_todo(
    session: Session,
    *,
    title: str,
    description: str | None = None,
    status: str | None = None,
    due_date: datetime | None = None,
    created_by: str | None = None,
) -> Todo:
    """Create and return a todo row."""
    todo = Todo(title=title, description=description, due_date=due_date, created_by=created_by)
    if status is not None:
        todo.status = status
    session.add(todo)
    session.flush()
    session.refresh(todo)
    return todo


def get_todo(session: Session, todo_id: UUID) -> Todo | None:
    """Fetch a todo by id."""
    return session.get(Todo, todo_id)


def list_todos(session: Session, descriptor: FilterDescriptor) -> list[Todo]:
    """List todos matching ``descriptor``."""
    stmt = apply_filter(select(Todo), Todo, descriptor)
    return list(session.scalars(stmt))


def update_todo(
    session: Session,
    todo: Todo,
    *,
    title: str | object = UNSET,
    description: str | None | object = UNSET,
    status: str | object = UNSET,
    due_date: datetime | None | object = UNSET,
    created_by: str | None | object = UNSET,
) -> Todo:
    """Update supplied todo fields."""
    if title is not UNSET:
        todo.title = title
    if description is not UNSET:
        todo.description = description
    if status is not UNSET:
        todo.status = status
    if due_date is not UNSET:
        todo.due_date = due_date
    if created_by is not UNSET:
        todo.created_by = created_by
    session.flush()
    session.refresh(todo)
    return todo


def delete_todo(session: Session, todo: Todo) -> None:
    session.delete(todo)
    session.flush()
