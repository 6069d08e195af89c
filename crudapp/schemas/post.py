"""Pydantic schemas for post API payloads."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict


class PostAuthor(BaseModel):
    """Author fields populated into a single post."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str


class PostSummary(BaseModel):
    """Projection returned by post listings."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    content: str
    status: bool


class Post(BaseModel):
    """Post response payload."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    author_id: UUID
    title: str
    content: str
    status: bool
    created_at: datetime
    updated_at: datetime


class PostDetail(Post):
    """Post with its author populated."""

    author: PostAuthor


class PostCount(BaseModel):
    count: int
