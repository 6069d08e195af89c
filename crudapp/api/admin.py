"""Administrator-only routes."""

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
from crudapp.core.security import require_roles
from crudapp.db.base import get_db_session
from crudapp.db.models.user import User
from crudapp.db.models.user import UserRoleEnum
from crudapp.schemas.order import Order
from crudapp.schemas.product import Product
from crudapp.schemas.user import UserPage
from crudapp.schemas.user import UserRecord
from crudapp.services.orders import update_order_status_service
from crudapp.services.products import create_product_service
from crudapp.services.users import change_role_service
from crudapp.services.users import create_user_service
from crudapp.services.users import list_users_service

router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin"],
    dependencies=[Depends(require_roles(UserRoleEnum.ADMIN.value))],
)


@router.get("/users")
def list_users_endpoint(
    request: Request,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Page through all users."""
    descriptor, users, total, total_pages = list_users_service(session, request.query_params)
    page = UserPage(
        page=descriptor.pagination.page,
        limit=descriptor.pagination.limit,
        total_users=total,
        total_pages=total_pages,
        users=[UserRecord.model_validate(user) for user in users],
    )
    return render(ok("Get users successfully", page))


@router.post("/users", status_code=201)
def create_user_endpoint(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Create an account with a chosen role."""
    user = create_user_service(session, payload)
    return render(created("Create user successfully", UserRecord.model_validate(user)))


@router.patch("/users/{user_id}/role")
def change_role_endpoint(
    user_id: UUID,
    payload: dict[str, Any] = Body(...),
    acting_user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    user = change_role_service(session, acting_user, user_id, payload)
    return render(ok("Update user role successfully", UserRecord.model_validate(user)))


@router.post("/products", status_code=201)
def create_product_endpoint(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    product = create_product_service(session, payload)
    return render(created("Create product successfully", Product.model_validate(product)))


@router.patch("/orders/{order_id}/status")
def update_order_status_endpoint(
    order_id: UUID,
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Move any order to processing, delivered or cancelled."""
    order = update_order_status_service(session, order_id, payload)
    return render(ok("Update order status successfully", Order.model_validate(order)))
