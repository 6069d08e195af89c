"""Authenticated profile routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi import Body
from fastapi import Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from crudapp.core.responses import ok
from crudapp.core.responses import render
from crudapp.core.security import get_current_user
from crudapp.db.base import get_db_session
from crudapp.db.models.user import User
from crudapp.schemas.envelope import MessageResult
from crudapp.schemas.user import ProfileResult
from crudapp.schemas.user import UserInfo
from crudapp.services.users import change_password_service
from crudapp.services.users import update_profile_service

router = APIRouter(prefix="/api/v1", tags=["profile"])


@router.get("/profile")
def get_profile_endpoint(user: User = Depends(get_current_user)) -> JSONResponse:
    """Return the authenticated user's profile."""
    return render(ok("Get profile successfully", ProfileResult(profile=UserInfo.model_validate(user))))


@router.patch("/profile")
def update_profile_endpoint(
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Update the authenticated user's username."""
    user = update_profile_service(session, user, payload)
    return render(ok("Update profile successfully", ProfileResult(profile=UserInfo.model_validate(user))))


@router.patch("/profile/password")
def change_password_endpoint(
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Change the password; tokens issued before the change stop working."""
    change_password_service(session, user, payload)
    return render(ok("Change password successfully", MessageResult(message="Password changed successfully.")))
