"""Authenticated shopping cart routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi import Body
from fastapi import Depends
from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from crudapp.core.responses import ok
from crudapp.core.responses import render
from crudapp.core.security import get_current_user
from crudapp.db.base import get_db_session
from crudapp.db.models.user import User
from crudapp.schemas.cart import CartLine
from crudapp.schemas.cart import CartView
from crudapp.schemas.cart import PriceBreakdown
from crudapp.services.cart import CartContents
from crudapp.services.cart import add_to_cart_service
from crudapp.services.cart import get_cart_service
from crudapp.services.cart import remove_cart_item_service
from crudapp.services.cart import update_cart_item_service
from crudapp.services.pricing import pricing_from_query

router = APIRouter(prefix="/api/v1/cart", tags=["cart"])


def _cart_view(contents: CartContents) -> CartView:
    return CartView(
        items=[CartLine.model_validate(item) for item in contents.items],
        subtotal=contents.pricing.subtotal,
    )


@router.get("")
def get_cart_endpoint(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Return the cart; an empty cart has no items."""
    return render(ok("Get cart successfully", _cart_view(get_cart_service(session, user))))


@router.post("")
def add_to_cart_endpoint(
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    contents = add_to_cart_service(session, user, payload)
    return render(ok("Product added to cart", _cart_view(contents)))


@router.get("/total")
def cart_total_endpoint(
    request: Request,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Price the cart with optional ``discount``, ``taxRate`` and ``shippingFee`` query values."""
    options = pricing_from_query(request.query_params)
    contents = get_cart_service(session, user, options)
    return render(ok("Get cart total successfully", PriceBreakdown.model_validate(contents.pricing)))


@router.patch("/{product_id}")
def update_cart_item_endpoint(
    product_id: str,
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Set the quantity of a cart line; zero removes it."""
    contents = update_cart_item_service(session, user, product_id, payload)
    return render(ok("Cart updated successfully", _cart_view(contents)))


@router.delete("/{product_id}")
def remove_cart_item_endpoint(
    product_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    contents = remove_cart_item_service(session, user, product_id)
    return render(ok("Product removed from cart", _cart_view(contents)))
