"""Authenticated order routes."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from fastapi import APIRouter
from fastapi import Body
from fastapi import Depends
from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from crudapp.core.responses import created
from crudapp.core.responses import ok
from crudapp.core.responses import render
from crudapp.core.security import get_current_user
from crudapp.db.base import get_db_session
from crudapp.db.models.user import User
from crudapp.schemas.order import Order
from crudapp.schemas.order import OrderPage
from crudapp.services.orders import cancel_order_service
from crudapp.services.orders import confirm_order_service
from crudapp.services.orders import create_order_service
from crudapp.services.orders import get_order_service
from crudapp.services.orders import list_orders_service

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.post("", status_code=201)
def create_order_endpoint(
    payload: dict[str, Any] | None = Body(None),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Check out the cart with optional discount, tax rate and shipping fee."""
    order = create_order_service(session, user, payload)
    return render(created("Create order successfully", Order.model_validate(order)))


@router.get("")
def list_orders_endpoint(
    request: Request,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Page through the user's orders, newest first, optionally by status."""
    descriptor, orders, total, total_pages = list_orders_service(session, user, request.query_params)
    page = OrderPage(
        page=descriptor.pagination.page,
        limit=descriptor.pagination.limit,
        total_orders=total,
        total_pages=total_pages,
        orders=[Order.model_validate(order) for order in orders],
    )
    return render(ok("Get all orders successfully", page))


@router.get("/{order_id}")
def get_order_endpoint(
    order_id: UUID,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    order = get_order_service(session, user, order_id)
    return render(ok("Get order successfully", Order.model_validate(order)))


@router.patch("/{order_id}/confirm")
def confirm_order_endpoint(
    order_id: UUID,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    order = confirm_order_service(session, user, order_id)
    return render(ok("Order confirmed successfully", Order.model_validate(order)))


@router.patch("/{order_id}/cancel")
def cancel_order_endpoint(
    order_id: UUID,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    order = cancel_order_service(session, user, order_id)
    return render(ok("Order cancelled successfully", Order.model_validate(order)))
