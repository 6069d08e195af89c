"""Repository primitives for catalog products."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy import select
from sqlalchemy.orm import Session

from crudapp.db.models.product import Product
from crudapp.db.repository.querying import apply_filter
from crudapp.db.repository.querying import apply_predicates
from crudapp.queries.filters import FilterDescriptor


def create_product(
    session: Session,
    *,
    name: str,
    sku: str,
    price: Decimal,
    quantity: int,
    description: str | None = None,
    thumbnail: str | None = None,
    image: str | None = None,
) -> Product:
    """Create and return a product row."""
    product = Product(
        name=name,
        sku=sku,
        price=price,
        quantity=quantity,
        description=description,
        thumbnail=thumbnail,
        image=image,
    )
    session.add(product)
    session.flush()
    session.refresh(product)
    return product


def get_product(session: Session, product_id: UUID) -> Product | None:
    return session.get(Product, product_id)


def get_product_by_sku(session: Session, sku: str) -> Product | None:
    return session.scalars(select(Product).where(Product.sku == sku)).first()


def list_products(session: Session, descriptor: FilterDescriptor) -> list[Product]:
    """List products matching ``descriptor``."""
    stmt = apply_filter(select(Product), Product, descriptor)
    return list(session.scalars(stmt))


def count_products(session: Session, descriptor: FilterDescriptor) -> int:
    """Count products matching the predicates of ``descriptor``, ignoring pagination."""
    stmt = apply_predicates(select(func.count()).select_from(Product), Product, descriptor)
    return session.scalar(stmt) or 0


def lock_products(session: Session, product_ids: Iterable[UUID]) -> dict[UUID, Product]:
    """Load products by id with a row lock held until the transaction ends."""
    ids = sorted(set(product_ids))
    if not ids:
        return {}
    stmt = select(Product).where(Product.id.in_(ids)).order_by(Product.id).with_for_update()
    return {product.id: product for product in session.scalars(stmt)}


def adjust_stock(session: Session, product: Product, delta: int) -> Product:
    product.quantity = product.quantity + delta
    session.flush()
    return product
