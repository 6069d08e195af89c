"""Service helpers for registration, login and session revocation."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crudapp.core.config import Settings
from crudapp.core.errors import ConflictError
from crudapp.core.errors import UnauthorizedError
from crudapp.core.security import hash_password
from crudapp.core.security import issue_tokens
from crudapp.core.security import verify_password
from crudapp.db.models.user import User
from crudapp.db.repository.users import bump_token_version
from crudapp.db.repository.users import create_user
from crudapp.db.repository.users import find_user_by_email_or_username
from crudapp.db.repository.users import get_user_by_email
from crudapp.validation.engine import ValidationMode
from crudapp.validation.engine import ensure_valid
from crudapp.validation.payloads import LOGIN_RULES
from crudapp.validation.payloads import REGISTRATION_RULES

logger = logging.getLogger(__name__)

DUPLICATE_ACCOUNT_MESSAGE = "Email or username already exists."
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials."


def create_account(
    session: Session,
    value: Mapping[str, Any],
    *,
    role: str | None = None,
    is_verified: bool | None = None,
) -> User:
    """Persist an account from validated registration fields."""
    if find_user_by_email_or_username(session, email=value["email"], username=value["username"]):
        raise ConflictError(DUPLICATE_ACCOUNT_MESSAGE)

    try:
        user = create_user(
            session,
            username=value["username"],
            email=value["email"],
            password_hash=hash_password(value["password"]),
            role=role,
            is_verified=is_verified,
        )
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError(DUPLICATE_ACCOUNT_MESSAGE) from None
    return user


def register_service(session: Session, payload: Any) -> User:
    """Create a regular, unverified account; role and verification cannot be self-assigned."""
    value = ensure_valid(payload, REGISTRATION_RULES, ValidationMode.ABORT_EARLY)
    user = create_account(session, value)
    logger.info("Registered user id=%s", user.id)
    return user


def login_service(session: Session, settings: Settings, payload: Any) -> tuple[User, dict[str, str]]:
    """Check credentials and issue an access/refresh token pair."""
    value = ensure_valid(payload, LOGIN_RULES)

    user = get_user_by_email(session, value["email"])
    if user is None or not verify_password(value["password"], user.password_hash):
        raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)

    logger.info("User id=%s logged in", user.id)
    return user, issue_tokens(settings, user_id=user.id, role=user.role, token_version=user.token_version)


def logout_service(session: Session, user: User) -> None:
    """Revoke every token issued to the user so far."""
    bump_token_version(session, user)
    session.commit()
    logger.info("User id=%s logged out", user.id)
