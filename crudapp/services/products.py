"""Service helpers for the product catalog."""

from __future__ import annotations

from collections.abc import Mapping
import logging
import math
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crudapp.core.errors import ConflictError
from crudapp.core.errors import NotFoundError
from crudapp.db.models.product import Product
from crudapp.db.repository.products import count_products
from crudapp.db.repository.products import create_product
from crudapp.db.repository.products import get_product
from crudapp.db.repository.products import get_product_by_sku
from crudapp.db.repository.products import list_products
from crudapp.queries.filters import FilterDescriptor
from crudapp.queries.filters import FilterProfile
from crudapp.queries.filters import build_filter
from crudapp.validation.engine import ensure_valid
from crudapp.validation.payloads import PRODUCT_RULES

logger = logging.getLogger(__name__)

SKU_TAKEN_MESSAGE = "SKU already exists."

PRODUCT_FILTER_PROFILE = FilterProfile(
    search_param="search",
    search_fields=("name", "sku"),
)


def create_product_service(session: Session, payload: Any) -> Product:
    """Validate and add a product to the catalog."""
    value = ensure_valid(payload, PRODUCT_RULES)
    if get_product_by_sku(session, value["sku"]) is not None:
        raise ConflictError(SKU_TAKEN_MESSAGE)

    try:
        product = create_product(
            session,
            name=value["name"],
            sku=value["sku"],
            price=value["price"],
            quantity=value["quantity"],
            description=value.get("description"),
            thumbnail=value.get("thumbnail"),
            image=value.get("image"),
        )
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError(SKU_TAKEN_MESSAGE) from None

    logger.info("Created product id=%s sku=%s", product.id, product.sku)
    return product


def list_products_service(
    session: Session,
    raw_query: Mapping[str, Any],
) -> tuple[FilterDescriptor, list[Product], int, int]:
    """Return the descriptor used, one page of products, the total and the page count."""
    descriptor = build_filter(raw_query, PRODUCT_FILTER_PROFILE)
    products = list_products(session, descriptor)
    total = count_products(session, descriptor)
    total_pages = math.ceil(total / descriptor.pagination.limit)
    return descriptor, products, total, total_pages


def get_product_service(session: Session, product_id: UUID) -> Product:
    product = get_product(session, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product
