"""Service helpers for post API operations."""

from __future__ import annotations

from collections.abc import Mapping
from functools import partial
import logging
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from crudapp.core.errors import BadRequestError
from crudapp.core.errors import NotFoundError
from crudapp.db.models.post import Post
from crudapp.db.repository.posts import count_posts_by_author
from crudapp.db.repository.posts import create_post
from crudapp.db.repository.posts import delete_post
from crudapp.db.repository.posts import get_post
from crudapp.db.repository.posts import list_posts
from crudapp.db.repository.posts import update_post
from crudapp.db.repository.users import find_user_ids_by_username
from crudapp.db.repository.users import get_user
from crudapp.queries.filters import FilterProfile
from crudapp.queries.filters import build_filter
from crudapp.queries.filters import parse_bool
from crudapp.validation.engine import ensure_valid
from crudapp.validation.payloads import POST_CREATE_RULES
from crudapp.validation.payloads import POST_UPDATE_RULES

logger = logging.getLogger(__name__)

POST_FILTER_PROFILE = FilterProfile(
    exact_fields={"status": partial(parse_bool, name="status")},
    substring_fields=("title",),
    reference_fields=("author",),
    period_flag="isCurrentMonth",
    period_companion="author",
)


def _resolve_author(session: Session, raw: str) -> UUID:
    try:
        author_id = UUID(raw)
    except ValueError:
        raise BadRequestError("Author must be a valid user id") from None
    if get_user(session, author_id) is None:
        raise NotFoundError("Author not found")
    return author_id


def create_post_service(session: Session, payload: Any) -> Post:
    """Validate and persist a new post."""
    value = ensure_valid(payload, POST_CREATE_RULES)
    author_id = _resolve_author(session, value["author"])
    post = create_post(
        session,
        author_id=author_id,
        title=value["title"],
        content=value["content"],
        status=value.get("status"),
    )
    session.commit()
    logger.info("Created post id=%s author_id=%s", post.id, author_id)
    return post


def list_posts_service(session: Session, raw_query: Mapping[str, Any]) -> list[Post]:
    """List posts; author names are resolved to matching user ids."""
    descriptor = build_filter(
        raw_query,
        POST_FILTER_PROFILE,
        resolve_reference=lambda _, text: find_user_ids_by_username(session, text),
    )
    return list_posts(session, descriptor)


def get_post_service(session: Session, post_id: UUID) -> Post:
    """Fetch a post with its author or raise not found."""
    post = get_post(session, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


def update_post_service(session: Session, post_id: UUID, payload: Any) -> Post:
    """Apply the validated subset of ``payload`` to an existing post."""
    value = ensure_valid(payload, POST_UPDATE_RULES)
    post = get_post_service(session, post_id)

    changes: dict[str, Any] = {key: value[key] for key in ("title", "content", "status") if key in value}
    if "author" in value:
        changes["author_id"] = _resolve_author(session, value["author"])

    post = update_post(session, post, **changes)
    session.commit()
    logger.info("Updated post id=%s fields=%s", post.id, sorted(changes))
    return post


def delete_post_service(session: Session, post_id: UUID) -> None:
    post = get_post_service(session, post_id)
    delete_post(session, post)
    session.commit()
    logger.info("Deleted post id=%s", post_id)


def count_posts_by_user_service(session: Session, user_id: UUID) -> int:
    """Count posts written by an existing user."""
    if get_user(session, user_id) is None:
        raise NotFoundError("User not found")
    return count_posts_by_author(session, user_id)
