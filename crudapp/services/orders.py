"""Service helpers for checkout and the order lifecycle."""

from __future__ import annotations

from collections.abc import Mapping
import logging
import math
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from crudapp.core.errors import BadRequestError
from crudapp.core.errors import NotFoundError
from crudapp.db.models.order import ORDER_STATUSES
from crudapp.db.models.order import Order
from crudapp.db.models.order import OrderStatusEnum
from crudapp.db.models.user import User
from crudapp.db.repository.cart import clear_cart
from crudapp.db.repository.cart import list_cart_items
from crudapp.db.repository.orders import count_orders
from crudapp.db.repository.orders import create_order
from crudapp.db.repository.orders import get_order
from crudapp.db.repository.orders import list_orders
from crudapp.db.repository.orders import set_order_status
from crudapp.db.repository.products import adjust_stock
from crudapp.db.repository.products import lock_products
from crudapp.queries.filters import FilterDescriptor
from crudapp.queries.filters import FilterProfile
from crudapp.queries.filters import SortKey
from crudapp.queries.filters import build_filter
from crudapp.services.pricing import PRICING_PARAMS
from crudapp.services.pricing import PricingOptions
from crudapp.services.pricing import price_lines
from crudapp.validation.engine import ensure_valid
from crudapp.validation.payloads import ORDER_STATUS_RULES
from crudapp.validation.payloads import PRICING_RULES

logger = logging.getLogger(__name__)

PROCESSING = OrderStatusEnum.PROCESSING.value
DELIVERED = OrderStatusEnum.DELIVERED.value
CANCELLED = OrderStatusEnum.CANCELLED.value


def _parse_status(raw: Any) -> str:
    status = str(raw).strip().lower()
    if status not in ORDER_STATUSES:
        raise BadRequestError("Invalid status. Valid statuses are: processing, delivered, cancelled.")
    return status


ORDER_FILTER_PROFILE = FilterProfile(
    exact_fields={"status": _parse_status},
    default_sort=SortKey.CREATED_DESC,
)


def create_order_service(session: Session, user: User, payload: Any) -> Order:
    """Check out the user's cart.

    Stock is checked and decremented under row locks, unit prices are copied
    onto the order items, and the cart is emptied in the same transaction.
    """
    value = ensure_valid(payload if payload is not None else {}, PRICING_RULES)
    options = PricingOptions(**{PRICING_PARAMS[name]: amount for name, amount in value.items()})

    items = list_cart_items(session, user.id)
    if not items:
        raise BadRequestError("Cart is empty")

    products = lock_products(session, (item.product_id for item in items))
    for item in items:
        product = products[item.product_id]
        if product.quantity < item.quantity:
            raise BadRequestError(f"Not enough stock for product {product.name}")

    pricing = price_lines(((products[item.product_id].price, item.quantity) for item in items), options)
    order = create_order(
        session,
        user_id=user.id,
        lines=[(item.product_id, item.quantity, products[item.product_id].price) for item in items],
        discount=options.discount,
        tax_rate=options.tax_rate,
        shipping_fee=pricing.shipping_fee,
        subtotal=pricing.subtotal,
        total=pricing.total,
    )
    for item in items:
        adjust_stock(session, products[item.product_id], -item.quantity)
    clear_cart(session, user.id)
    session.commit()

    logger.info("Created order id=%s user_id=%s total=%s", order.id, user.id, order.total)
    return get_order_service(session, user, order.id)


def list_orders_service(
    session: Session,
    user: User,
    raw_query: Mapping[str, Any],
) -> tuple[FilterDescriptor, list[Order], int, int]:
    """Return the descriptor used, one page of the user's orders, the total and the page count."""
    descriptor = build_filter(raw_query, ORDER_FILTER_PROFILE)
    orders = list_orders(session, user.id, descriptor)
    total = count_orders(session, user.id, descriptor)
    total_pages = math.ceil(total / descriptor.pagination.limit)
    return descriptor, orders, total, total_pages


def get_order_service(session: Session, user: User, order_id: UUID) -> Order:
    """Fetch one of the user's orders; other users' orders are reported as missing."""
    order = get_order(session, order_id, user_id=user.id)
    if order is None:
        raise NotFoundError("Order not found")
    return order


def _restock(session: Session, order: Order) -> None:
    products = lock_products(session, (item.product_id for item in order.items))
    for item in order.items:
        adjust_stock(session, products[item.product_id], item.quantity)


def confirm_order_service(session: Session, user: User, order_id: UUID) -> Order:
    """Mark a processing order as delivered."""
    order = get_order_service(session, user, order_id)
    if order.status != PROCESSING:
        raise BadRequestError("Order cannot be confirmed")

    order = set_order_status(session, order, DELIVERED)
    session.commit()
    logger.info("Confirmed order id=%s", order.id)
    return order


def cancel_order_service(session: Session, user: User, order_id: UUID) -> Order:
    """Cancel a processing order and return its items to stock."""
    order = get_order_service(session, user, order_id)
    if order.status == CANCELLED:
        raise BadRequestError("Order is already cancelled")
    if order.status != PROCESSING:
        raise BadRequestError("Order cannot be cancelled because it has already been shipped or delivered.")

    _restock(session, order)
    order = set_order_status(session, order, CANCELLED)
    session.commit()
    logger.info("Cancelled order id=%s", order.id)
    return order


def update_order_status_service(session: Session, order_id: UUID, payload: Any) -> Order:
    """Set any order's status; cancelling restocks and a cancelled order stays cancelled."""
    value = ensure_valid(payload, ORDER_STATUS_RULES)
    order = get_order(session, order_id)
    if order is None:
        raise NotFoundError("Order not found")

    status = value["status"]
    if order.status == status:
        return order
    if order.status == CANCELLED:
        raise BadRequestError("Cancelled orders cannot be reopened")

    if status == CANCELLED:
        _restock(session, order)
    order = set_order_status(session, order, status)
    session.commit()
    logger.info("Order id=%s status changed to %s", order.id, status)
    return order
