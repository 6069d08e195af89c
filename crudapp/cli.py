"""Operator commands run outside the HTTP API."""

from __future__ import annotations

import argparse
import sys

from crudapp.core.errors import APIError
from crudapp.db.base import SessionLocal
from crudapp.db.models.user import UserRoleEnum
from crudapp.services.auth import create_account
from crudapp.validation.engine import ensure_valid
from crudapp.validation.payloads import REGISTRATION_RULES


def create_admin(email: str, username: str, password: str) -> int:
    """Create a verified administrator; registration over HTTP only creates regular users."""
    payload = {"email": email, "username": username, "password": password}
    with SessionLocal() as session:
        try:
            value = ensure_valid(payload, REGISTRATION_RULES)
            user = create_account(session, value, role=UserRoleEnum.ADMIN.value, is_verified=True)
        except APIError as exc:
            print(f"error: {exc.message}", file=sys.stderr)
            return 1
    print(f"created admin: {user.id}")
    return 0


def _cli(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="crudapp administration commands.")
    commands = parser.add_subparsers(dest="command", required=True)

    admin = commands.add_parser("create-admin", help="Create an administrator account")
    admin.add_argument("--email", required=True)
    admin.add_argument("--username", required=True)
    admin.add_argument("--password", required=True)
    args = parser.parse_args(argv)

    return create_admin(args.email, args.username, args.password)


def main() -> None:
    """CLI entrypoint."""
    raise SystemExit(_cli())


if __name__ == "__main__":
    main()
