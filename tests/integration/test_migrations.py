"""Schema tests applying the alembic migrations to a scratch database."""

from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine
from sqlalchemy import inspect
from sqlalchemy import text

ROOT = Path(__file__).resolve().parents[2]


def _alembic_config(database_url: str) -> Config:
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "migrations"))
    config.set_main_option("sqlalchemy.url", database_url)
    return config


def test_upgrade_and_downgrade_round_trip(tmp_path: Path) -> None:
    database_url = f"sqlite:///{tmp_path / 'schema.db'}"
    config = _alembic_config(database_url)

    command.upgrade(config, "head")
    engine = create_engine(database_url)
    try:
        inspector = inspect(engine)
        assert {"users", "posts", "todos"} <= set(inspector.get_table_names())
        user_columns = {column["name"] for column in inspector.get_columns("users")}
        assert {"id", "username", "email", "password_hash", "role", "is_verified"} <= user_columns
        unique_names = {constraint["name"] for constraint in inspector.get_unique_constraints("users")}
        assert {"uq_users_email", "uq_users_username"} <= unique_names
        assert {"products", "cart_items", "orders", "order_items"} <= set(inspector.get_table_names())
        assert "token_version" in user_columns
        cart_uniques = {constraint["name"] for constraint in inspector.get_unique_constraints("cart_items")}
        assert "uq_cart_items_user_id_product_id" in cart_uniques
        order_indexes = {index["name"] for index in inspector.get_indexes("orders")}
        assert "ix_orders_user_id_created_at" in order_indexes
    finally:
        engine.dispose()

    command.downgrade(config, "base")
    engine = create_engine(database_url)
    try:
        assert "users" not in inspect(engine).get_table_names()
    finally:
        engine.dispose()


def test_token_version_backfills_existing_users(tmp_path: Path) -> None:
    database_url = f"sqlite:///{tmp_path / 'backfill.db'}"
    config = _alembic_config(database_url)

    command.upgrade(config, "001_create_users_posts_todos")
    engine = create_engine(database_url)
    try:
        with engine.begin() as connection:
            connection.execute(
                text(
                    "INSERT INTO users (id, username, email, password_hash, role, is_verified, created_at, updated_at) "
                    "VALUES ('7d1f4c6e9b2a4f0e8c3d5a6b7c8d9e0f', 'jane42', 'jane@example.com', 'x', 'user', 0, "
                    "'2026-01-01 00:00:00', '2026-01-01 00:00:00')"
                )
            )
    finally:
        engine.dispose()

    command.upgrade(config, "head")
    engine = create_engine(database_url)
    try:
        with engine.connect() as connection:
            assert connection.execute(text("SELECT token_version FROM users")).scalar_one() == 0
    finally:
        engine.dispose()

    command.downgrade(config, "001_create_users_posts_todos")
    engine = create_engine(database_url)
    try:
        inspector = inspect(engine)
        assert "products" not in inspector.get_table_names()
        assert "token_version" not in {column["name"] for column in inspector.get_columns("users")}
    finally:
        engine.dispose()
