"""Pydantic schemas for todo API payloads."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict

from crudapp.db.models.todo import TodoStatusEnum


class Todo(BaseModel):
    """Todo response payload."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None = None
    status: TodoStatusEnum
    due_date: datetime | None = None
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime
