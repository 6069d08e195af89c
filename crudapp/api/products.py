"""Public product catalog routes."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from crudapp.core.responses import ok
from crudapp.core.responses import render
from crudapp.db.base import get_db_session
from crudapp.schemas.product import Product
from crudapp.schemas.product import ProductPage
from crudapp.services.products import get_product_service
from crudapp.services.products import list_products_service

router = APIRouter(prefix="/api/v1", tags=["products"])


@router.get("/products")
def list_products_endpoint(
    request: Request,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Page through products, optionally searching name and SKU."""
    descriptor, products, total, total_pages = list_products_service(session, request.query_params)
    page = ProductPage(
        page=descriptor.pagination.page,
        limit=descriptor.pagination.limit,
        total_products=total,
        total_pages=total_pages,
        products=[Product.model_validate(product) for product in products],
    )
    return render(ok("Get all products successfully", page))


@router.get("/products/{product_id}")
def get_product_endpoint(
    product_id: UUID,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    product = get_product_service(session, product_id)
    return render(ok("Get product successfully", Product.model_validate(product)))
