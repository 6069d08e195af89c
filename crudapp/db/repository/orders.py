"""Repository primitives for orders."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm import selectinload

from crudapp.db.models.order import Order
from crudapp.db.models.order import OrderItem
from crudapp.db.repository.querying import apply_filter
from crudapp.db.repository.querying import apply_predicates
from crudapp.queries.filters import FilterDescriptor


def create_order(
    session: Session,
    *,
    user_id: UUID,
    lines: Sequence[tuple[UUID, int, Decimal]],
    discount: Decimal,
    tax_rate: Decimal,
    shipping_fee: Decimal,
    subtotal: Decimal,
    total: Decimal,
) -> Order:
    """Create an order with one item per ``(product_id, quantity, unit_price)`` line."""
    order = Order(
        user_id=user_id,
        discount=discount,
        tax_rate=tax_rate,
        shipping_fee=shipping_fee,
        subtotal=subtotal,
        total=total,
        items=[
            OrderItem(product_id=product_id, position=position, quantity=quantity, unit_price=unit_price)
            for position, (product_id, quantity, unit_price) in enumerate(lines)
        ],
    )
    session.add(order)
    session.flush()
    return order


def get_order(session: Session, order_id: UUID, *, user_id: UUID | None = None) -> Order | None:
    """Fetch an order with items and products; ``user_id`` restricts it to its owner."""
    stmt = (
        select(Order)
        .options(selectinload(Order.items).selectinload(OrderItem.product))
        .where(Order.id == order_id)
    )
    if user_id is not None:
        stmt = stmt.where(Order.user_id == user_id)
    return session.scalars(stmt).first()


def list_orders(session: Session, user_id: UUID, descriptor: FilterDescriptor) -> list[Order]:
    """List a user's orders matching ``descriptor``."""
    stmt = apply_filter(
        select(Order).options(selectinload(Order.items)).where(Order.user_id == user_id),
        Order,
        descriptor,
    )
    return list(session.scalars(stmt))


def count_orders(session: Session, user_id: UUID, descriptor: FilterDescriptor) -> int:
    stmt = select(func.count()).select_from(Order).where(Order.user_id == user_id)
    return session.scalar(apply_predicates(stmt, Order, descriptor)) or 0


def set_order_status(session: Session, order: Order, status: str) -> Order:
    order.status = status
    session.flush()
    session.refresh(order)
    return order
