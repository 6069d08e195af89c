"""Repository primitives for post entities."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func
from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm import joinedload

from crudapp.db.models.post import Post
from crudapp.db.repository.querying import apply_filter
from crudapp.queries.filters import FilterDescriptor

UNSET = object()

POST_COLUMNS = {"author": "author_id"}


def create_post(
    session: Session,
    *,
    author_id: UUID,
    title: str,
    content: str,
    status: bool | None = None,
) -> Post:
    """Create and return a post row."""
    post = Post(author_id=author_id, title=title, content=content)
    if status is not None:
        post.status = status
    session.add(post)
    session.flush()
    session.refresh(post)
    return post


def get_post(session: Session, post_id: UUID) -> Post | None:
    """Fetch a post with its author loaded."""
    stmt = select(Post).options(joinedload(Post.author)).where(Post.id == post_id)
    return session.scalars(stmt).first()


def list_posts(session: Session, descriptor: FilterDescriptor) -> list[Post]:
    """List posts matching ``descriptor``."""
    stmt = apply_filter(select(Post), Post, descriptor, columns=POST_COLUMNS)
    return list(session.scalars(stmt))


def update_post(
    session: Session,
    post: Post,
    *,
    author_id: UUID | object = UNSET,
    title: str | object = UNSET,
    content: str | object = UNSET,
    status: bool | object = UNSET,
) -> Post:
    """Update supplied post fields."""
    if author_id is not UNSET:
        post.author_id = author_id
    if title is not UNSET:
        post.title = title
    if content is not UNSET:
        post.content = content
    if status is not UNSET:
        post.status = status
    session.flush()
    session.refresh(post)
    return post


def delete_post(session: Session, post: Post) -> None:
    session.delete(post)
    session.flush()


def count_posts_by_author(session: Session, author_id: UUID) -> int:
    stmt = select(func.count()).select_from(Post).where(Post.author_id == author_id)
    return session.scalar(stmt) or 0
