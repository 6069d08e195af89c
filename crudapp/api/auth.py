"""Registration, login and logout routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi import Body
from fastapi import Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from crudapp.core.config import Settings
from crudapp.core.config import get_settings
from crudapp.core.responses import created
from crudapp.core.responses import ok
from crudapp.core.responses import render
from crudapp.core.security import get_current_user
from crudapp.db.base import get_db_session
from crudapp.db.models.user import User
from crudapp.schemas.envelope import MessageResult
from crudapp.schemas.user import AuthTokens
from crudapp.schemas.user import LoginResult
from crudapp.schemas.user import RegisterResult
from crudapp.schemas.user import UserInfo
from crudapp.services.auth import login_service
from crudapp.services.auth import logout_service
from crudapp.services.auth import register_service

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", status_code=201)
def register_endpoint(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Register a new account."""
    user = register_service(session, payload)
    return render(created("Register successfully", RegisterResult(user=UserInfo.model_validate(user))))


@router.post("/login")
def login_endpoint(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Exchange credentials for an access/refresh token pair."""
    user, tokens = login_service(session, settings, payload)
    result = LoginResult(user=UserInfo.model_validate(user), tokens=AuthTokens(**tokens))
    return render(ok("Login successfully", result))


@router.post("/logout")
def logout_endpoint(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Revoke every token issued to the authenticated user."""
    logout_service(session, user)
    return render(ok("Logout successfully", MessageResult(message="Logged out from all sessions")))
