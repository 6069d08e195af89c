"""Repository primitives for user entities."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func
from sqlalchemy import or_
from sqlalchemy import select
from sqlalchemy.orm import Session

from crudapp.db.models.user import User
from crudapp.db.repository.querying import apply_filter
from crudapp.db.repository.querying import ilike_contains
from crudapp.queries.filters import FilterDescriptor


def create_user(
    session: Session,
    *,
    username: str,
    email: str,
    password_hash: str,
    role: str | None = None,
    is_verified: bool | None = None,
) -> User:
    """Create and return a user row."""
    user = User(username=username, email=email, password_hash=password_hash)
    if role is not None:
        user.role = role
    if is_verified is not None:
        user.is_verified = is_verified
    session.add(user)
    session.flush()
    session.refresh(user)
    return user


def get_user(session: Session, user_id: UUID) -> User | None:
    """Fetch a user by id."""
    return session.get(User, user_id)


def get_user_by_email(session: Session, email: str) -> User | None:
    return session.scalars(select(User).where(User.email == email)).first()


def get_user_by_username(session: Session, username: str) -> User | None:
    return session.scalars(select(User).where(User.username == username)).first()


def find_user_by_email_or_username(session: Session, *, email: str, username: str) -> User | None:
    """Return any user holding either the email or the username."""
    stmt = select(User).where(or_(User.email == email, User.username == username)).limit(1)
    return session.scalars(stmt).first()


def find_user_ids_by_username(session: Session, text: str) -> list[UUID]:
    """Return ids of users whose username contains ``text`` (case-insensitive)."""
    stmt = select(User.id).where(ilike_contains(User.username, text))
    return list(session.scalars(stmt))


def list_users(session: Session, descriptor: FilterDescriptor) -> list[User]:
    """List users ordered and paginated by ``descriptor``."""
    stmt = apply_filter(select(User), User, descriptor)
    return list(session.scalars(stmt))


def count_users(session: Session) -> int:
    return session.scalar(select(func.count()).select_from(User)) or 0


def update_user(session: Session, user: User, *, username: str | None = None) -> User:
    """Update mutable profile fields."""
    if username is not None:
        user.username = username
    session.flush()
    session.refresh(user)
    return user


def set_user_role(session: Session, user: User, role: str) -> User:
    user.role = role
    session.flush()
    session.refresh(user)
    return user


def set_password_hash(session: Session, user: User, password_hash: str) -> User:
    user.password_hash = password_hash
    session.flush()
    return user


def bump_token_version(session: Session, user: User) -> User:
    """Invalidate tokens issued before this call."""
    user.token_version = user.token_version + 1
    session.flush()
    session.refresh(user)
    return user
