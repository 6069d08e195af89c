"""Post API routes."""

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
from crudapp.schemas.post import Post
from crudapp.schemas.post import PostCount
from crudapp.schemas.post import PostDetail
from crudapp.schemas.post import PostSummary
from crudapp.services.posts import count_posts_by_user_service
from crudapp.services.posts import create_post_service
from crudapp.services.posts import delete_post_service
from crudapp.services.posts import get_post_service
from crudapp.services.posts import list_posts_service
from crudapp.services.posts import update_post_service

router = APIRouter(prefix="/api/v1", tags=["posts"])


@router.post("/posts", status_code=201)
def create_post_endpoint(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Create a post."""
    post = create_post_service(session, payload)
    return render(created("Create post successfully", Post.model_validate(post)))


@router.get("/posts")
def list_posts_endpoint(
    request: Request,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """List posts filtered by title, author, status and current month."""
    posts = list_posts_service(session, request.query_params)
    return render(ok("Get all posts successfully", [PostSummary.model_validate(post) for post in posts]))


@router.get("/posts/user/{user_id}/count")
def count_posts_by_user_endpoint(
    user_id: UUID,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Count posts written by a user."""
    count = count_posts_by_user_service(session, user_id)
    return render(ok("Count posts successfully", PostCount(count=count)))


@router.get("/posts/{post_id}")
def get_post_endpoint(
    post_id: UUID,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Get a single post with its author."""
    post = get_post_service(session, post_id)
    return render(ok("Get post successfully", PostDetail.model_validate(post)))


@router.put("/posts/{post_id}")
def update_post_endpoint(
    post_id: UUID,
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Update a post."""
    post = update_post_service(session, post_id, payload)
    return render(ok("Update post successfully", Post.model_validate(post)))


@router.delete("/posts/{post_id}")
def delete_post_endpoint(
    post_id: UUID,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Delete a post."""
    delete_post_service(session, post_id)
    return render(ok("Delete post successfully", MessageResult(message="Post deleted successfully")))
