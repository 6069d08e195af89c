"""Password hashing, token issuance and request authentication dependencies."""

from __future__ import annotations

import base64
from collections.abc import Callable
from datetime import datetime
from datetime import timedelta
from datetime import timezone
import hashlib
import hmac
import logging
import secrets
from typing import Any
from uuid import UUID

from fastapi import Depends
from fastapi import Request
from jose import ExpiredSignatureError
from jose import JWTError
from jose import jwt
from sqlalchemy.orm import Session

from crudapp.core.config import Settings
from crudapp.core.config import get_settings
from crudapp.core.errors import ForbiddenError
from crudapp.core.errors import UnauthorizedError
from crudapp.db.base import get_db_session
from crudapp.db.models.user import User
from crudapp.db.repository.users import get_user

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
PBKDF2_ITERATIONS = 100_000
AUTHORIZATION_HEADER = "authorization"


def hash_password(password: str, *, iterations: int = PBKDF2_ITERATIONS) -> str:
    """Hash a password as ``iterations$salt$digest`` (base64 parts)."""
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"{iterations}${base64.b64encode(salt).decode()}${base64.b64encode(digest).decode()}"


def verify_password(password: str, stored_hash: str) -> bool:
    """Check a password against a stored hash; malformed hashes never match."""
    try:
        iterations, salt_b64, digest_b64 = stored_hash.split("$")
        salt = base64.b64decode(salt_b64)
        expected = base64.b64decode(digest_b64)
        rounds = int(iterations)
    except ValueError:
        logger.warning("Stored password hash has an unexpected format")
        return False

    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    return hmac.compare_digest(digest, expected)


def _encode(claims: dict[str, Any], secret: str, ttl: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {**claims, "iat": now, "exp": now + ttl}
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def issue_tokens(settings: Settings, *, user_id: UUID, role: str, token_version: int = 0) -> dict[str, str]:
    """Issue an access/refresh token pair for a user.

    ``ver`` carries the user's token version; bumping the stored version
    revokes every token issued before.
    """
    claims = {"sub": str(user_id), "role": role, "ver": token_version}
    return {
        "access_token": _encode(
            {**claims, "type": "access"},
            settings.jwt_access_secret,
            timedelta(minutes=settings.access_token_ttl_minutes),
        ),
        "refresh_token": _encode(
            {**claims, "type": "refresh"},
            settings.jwt_refresh_secret,
            timedelta(days=settings.refresh_token_ttl_days),
        ),
    }


def decode_access_token(settings: Settings, token: str) -> dict[str, Any]:
    """Verify an access token and return its claims."""
    try:
        claims = jwt.decode(token, settings.jwt_access_secret, algorithms=[JWT_ALGORITHM])
    except ExpiredSignatureError as exc:
        raise UnauthorizedError("Token is expired.") from exc
    except JWTError as exc:
        raise UnauthorizedError("Token is invalid.") from exc

    if claims.get("type") != "access" or not claims.get("sub"):
        raise UnauthorizedError("Token is invalid.")
    return claims


def _bearer_token(request: Request) -> str:
    raw = request.headers.get(AUTHORIZATION_HEADER, "").strip()
    if not raw:
        raise UnauthorizedError("Token is missing.")
    scheme, _, credentials = raw.partition(" ")
    if scheme.lower() == "bearer":
        raw = credentials.strip()
    if not raw:
        raise UnauthorizedError("Token is missing.")
    return raw


def get_current_user(
    request: Request,
    session: Session = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> User:
    """Resolve the authenticated user from the Authorization header."""
    claims = decode_access_token(settings, _bearer_token(request))
    try:
        user_id = UUID(str(claims["sub"]))
    except ValueError as exc:
        raise UnauthorizedError("Token is invalid.") from exc

    user = get_user(session, user_id)
    if user is None:
        raise UnauthorizedError("User no longer exists.")
    if claims.get("ver", 0) != user.token_version:
        raise UnauthorizedError("Token has been revoked.")
    return user


def require_roles(*roles: str) -> Callable[..., User]:
    """Build a dependency allowing only users holding one of ``roles``."""
    allowed = frozenset(roles)

    def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise ForbiddenError()
        return user

    return dependency
