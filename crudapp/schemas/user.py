"""Pydantic schemas for user, auth and admin payloads."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict


class UserInfo(BaseModel):
    """Public user fields; never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    role: str
    is_verified: bool


class UserRecord(UserInfo):
    """User row as listed to administrators."""

    created_at: datetime
    updated_at: datetime


class AuthTokens(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RegisterResult(BaseModel):
    user: UserInfo


class LoginResult(BaseModel):
    user: UserInfo
    tokens: AuthTokens


class ProfileResult(BaseModel):
    profile: UserInfo


class UserPage(BaseModel):
    """Paginated user listing."""

    page: int
    limit: int
    total_users: int
    total_pages: int
    users: list[UserRecord]
