"""Service helpers for the authenticated user's shopping cart."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from crudapp.core.errors import BadRequestError
from crudapp.core.errors import NotFoundError
from crudapp.db.models.cart import CartItem
from crudapp.db.models.user import User
from crudapp.db.repository.cart import add_cart_item
from crudapp.db.repository.cart import delete_cart_item
from crudapp.db.repository.cart import get_cart_item
from crudapp.db.repository.cart import list_cart_items
from crudapp.db.repository.cart import set_cart_item_quantity
from crudapp.db.repository.products import get_product
from crudapp.services.pricing import PriceBreakdown
from crudapp.services.pricing import PricingOptions
from crudapp.services.pricing import price_lines
from crudapp.validation.engine import ensure_valid
from crudapp.validation.payloads import CART_ITEM_RULES
from crudapp.validation.payloads import CART_QUANTITY_RULES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartContents:
    items: list[CartItem]
    pricing: PriceBreakdown


def _parse_product_id(raw: str) -> UUID:
    try:
        return UUID(raw)
    except ValueError:
        raise BadRequestError("Product id must be a valid id") from None


def get_cart_service(session: Session, user: User, options: PricingOptions = PricingOptions()) -> CartContents:
    """Return the user's cart lines priced with ``options``; an empty cart prices to zero."""
    items = list_cart_items(session, user.id)
    pricing = price_lines(((item.product.price, item.quantity) for item in items), options)
    return CartContents(items=items, pricing=pricing)


def add_to_cart_service(session: Session, user: User, payload: Any) -> CartContents:
    """Add a product to the cart, increasing the quantity of an existing line."""
    value = ensure_valid(payload, CART_ITEM_RULES)
    product_id = _parse_product_id(value["productId"])
    if get_product(session, product_id) is None:
        raise NotFoundError("Product does not exist")

    add_cart_item(session, user_id=user.id, product_id=product_id, quantity=value["quantity"])
    session.commit()
    logger.info("Added product id=%s to cart of user id=%s", product_id, user.id)
    return get_cart_service(session, user)


def _cart_line(session: Session, user: User, raw_product_id: str) -> CartItem:
    item = get_cart_item(session, user.id, _parse_product_id(raw_product_id))
    if item is None:
        raise NotFoundError("Product not found in cart")
    return item


def update_cart_item_service(session: Session, user: User, raw_product_id: str, payload: Any) -> CartContents:
    """Set a line's quantity; zero removes the line."""
    value = ensure_valid(payload, CART_QUANTITY_RULES)
    item = _cart_line(session, user, raw_product_id)

    if value["quantity"] == 0:
        delete_cart_item(session, item)
    else:
        set_cart_item_quantity(session, item, value["quantity"])
    session.commit()
    logger.info("Set cart quantity product id=%s user id=%s quantity=%s", item.product_id, user.id, value["quantity"])
    return get_cart_service(session, user)


def remove_cart_item_service(session: Session, user: User, raw_product_id: str) -> CartContents:
    item = _cart_line(session, user, raw_product_id)
    delete_cart_item(session, item)
    session.commit()
    logger.info("Removed product id=%s from cart of user id=%s", item.product_id, user.id)
    return get_cart_service(session, user)
