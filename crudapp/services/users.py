"""Service helpers for profile and admin user operations."""

from __future__ import annotations

from collections.abc import Mapping
import logging
import math
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crudapp.core.errors import BadRequestError
from crudapp.core.errors import ConflictError
from crudapp.core.errors import NotFoundError
from crudapp.core.errors import UnauthorizedError
from crudapp.core.security import hash_password
from crudapp.core.security import verify_password
from crudapp.db.models.user import User
from crudapp.db.repository.users import bump_token_version
from crudapp.db.repository.users import count_users
from crudapp.db.repository.users import get_user
from crudapp.db.repository.users import get_user_by_username
from crudapp.db.repository.users import list_users
from crudapp.db.repository.users import set_password_hash
from crudapp.db.repository.users import set_user_role
from crudapp.db.repository.users import update_user
from crudapp.queries.filters import FilterDescriptor
from crudapp.queries.filters import build_filter
from crudapp.services.auth import create_account
from crudapp.validation.engine import ensure_valid
from crudapp.validation.payloads import ADMIN_USER_CREATE_RULES
from crudapp.validation.payloads import PASSWORD_CHANGE_RULES
from crudapp.validation.payloads import PROFILE_UPDATE_RULES
from crudapp.validation.payloads import ROLE_CHANGE_RULES

logger = logging.getLogger(__name__)

USERNAME_TAKEN_MESSAGE = "Username already exists."


def update_profile_service(session: Session, user: User, payload: Any) -> User:
    """Change the authenticated user's username."""
    value = ensure_valid(payload, PROFILE_UPDATE_RULES)
    username = value["username"]

    holder = get_user_by_username(session, username)
    if holder is not None and holder.id != user.id:
        raise ConflictError(USERNAME_TAKEN_MESSAGE)

    try:
        user = update_user(session, user, username=username)
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError(USERNAME_TAKEN_MESSAGE) from None

    logger.info("Updated profile for user id=%s", user.id)
    return user


def change_password_service(session: Session, user: User, payload: Any) -> User:
    """Replace the user's password and revoke their existing tokens."""
    value = ensure_valid(payload, PASSWORD_CHANGE_RULES)
    if not verify_password(value["oldPassword"], user.password_hash):
        raise UnauthorizedError("Old password is incorrect.")

    set_password_hash(session, user, hash_password(value["newPassword"]))
    user = bump_token_version(session, user)
    session.commit()
    logger.info("Changed password for user id=%s", user.id)
    return user


def list_users_service(
    session: Session,
    raw_query: Mapping[str, Any],
) -> tuple[FilterDescriptor, list[User], int, int]:
    """Return the descriptor used, one page of users, the total and the page count."""
    descriptor = build_filter(raw_query)
    users = list_users(session, descriptor)
    total = count_users(session)
    total_pages = math.ceil(total / descriptor.pagination.limit)
    return descriptor, users, total, total_pages


def create_user_service(session: Session, payload: Any) -> User:
    """Create an account with an explicit role and verification flag."""
    value = ensure_valid(payload, ADMIN_USER_CREATE_RULES)
    user = create_account(session, value, role=value.get("role"), is_verified=value.get("isVerified"))
    logger.info("Admin created user id=%s role=%s", user.id, user.role)
    return user


def change_role_service(session: Session, acting_user: User, user_id: UUID, payload: Any) -> User:
    """Change another user's role."""
    value = ensure_valid(payload, ROLE_CHANGE_RULES)
    user = get_user(session, user_id)
    if user is None:
        raise NotFoundError("User not found")
    if user.id == acting_user.id:
        raise BadRequestError("You cannot change your own role.")

    user = set_user_role(session, user, value["role"])
    session.commit()
    logger.info("User id=%s role changed to %s by id=%s", user.id, user.role, acting_user.id)
    return user
