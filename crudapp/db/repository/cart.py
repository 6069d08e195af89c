"""Repository primitives for cart lines."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete
from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm import joinedload

from crudapp.db.models.cart import CartItem


def list_cart_items(session: Session, user_id: UUID) -> list[CartItem]:
    """Return a user's cart lines with their products, oldest first."""
    stmt = (
        select(CartItem)
        .options(joinedload(CartItem.product))
        .where(CartItem.user_id == user_id)
        .order_by(CartItem.created_at, CartItem.id)
    )
    return list(session.scalars(stmt))


def get_cart_item(session: Session, user_id: UUID, product_id: UUID) -> CartItem | None:
    stmt = select(CartItem).where(CartItem.user_id == user_id, CartItem.product_id == product_id)
    return session.scalars(stmt).first()


def add_cart_item(session: Session, *, user_id: UUID, product_id: UUID, quantity: int) -> CartItem:
    """Add ``quantity`` of a product, merging into an existing line."""
    item = get_cart_item(session, user_id, product_id)
    if item is None:
        item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
        session.add(item)
    else:
        item.quantity = item.quantity + quantity
    session.flush()
    session.refresh(item)
    return item


def set_cart_item_quantity(session: Session, item: CartItem, quantity: int) -> CartItem:
    item.quantity = quantity
    session.flush()
    session.refresh(item)
    return item


def delete_cart_item(session: Session, item: CartItem) -> None:
    session.delete(item)
    session.flush()


def clear_cart(session: Session, user_id: UUID) -> None:
    session.execute(delete(CartItem).where(CartItem.user_id == user_id))
    session.flush()
