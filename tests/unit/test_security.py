"""Unit tests for password hashing and token helpers."""

from __future__ import annotations

from dataclasses import replace
from uuid import uuid4

import pytest

from crudapp.core.config import get_settings
from crudapp.core.errors import UnauthorizedError
from crudapp.core.security import decode_access_token
from crudapp.core.security import hash_password
from crudapp.core.security import issue_tokens
from crudapp.core.security import verify_password


def test_password_hash_round_trip_and_salting() -> None:
    first = hash_password("Secret123", iterations=1_000)
    second = hash_password("Secret123", iterations=1_000)

    assert first != second
    assert verify_password("Secret123", first)
    assert not verify_password("secret123", first)


@pytest.mark.parametrize("stored", ["", "plain", "1$not-base64$", "abc$AAAA$AAAA"])
def test_malformed_hashes_never_match(stored: str) -> None:
    assert verify_password("Secret123", stored) is False


def test_access_token_carries_subject_and_role() -> None:
    settings = get_settings()
    user_id = uuid4()

    tokens = issue_tokens(settings, user_id=user_id, role="admin")
    claims = decode_access_token(settings, tokens["access_token"])

    assert claims["sub"] == str(user_id)
    assert claims["role"] == "admin"
    assert claims["ver"] == 0


def test_tokens_carry_the_token_version() -> None:
    settings = get_settings()

    tokens = issue_tokens(settings, user_id=uuid4(), role="user", token_version=3)

    assert decode_access_token(settings, tokens["access_token"])["ver"] == 3


def test_refresh_token_is_not_accepted_as_access_token() -> None:
    settings = get_settings()
    tokens = issue_tokens(settings, user_id=uuid4(), role="user")

    with pytest.raises(UnauthorizedError) as exc_info:
        decode_access_token(settings, tokens["refresh_token"])

    assert exc_info.value.message == "Token is invalid."


def test_expired_access_token_is_rejected() -> None:
    settings = replace(get_settings(), access_token_ttl_minutes=-1)
    tokens = issue_tokens(settings, user_id=uuid4(), role="user")

    with pytest.raises(UnauthorizedError) as exc_info:
        decode_access_token(settings, tokens["access_token"])

    assert exc_info.value.message == "Token is expired."


def test_garbage_token_is_invalid() -> None:
    with pytest.raises(UnauthorizedError) as exc_info:
        decode_access_token(get_settings(), "not-a-jwt")

    assert exc_info.value.message == "Token is invalid."
