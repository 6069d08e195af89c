"""Pydantic schemas for catalog products."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import PlainSerializer

# Numeric columns come back as Decimal; clients receive JSON numbers.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float)]


class ProductSummary(BaseModel):
    """Product fields embedded in cart lines and order items."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    sku: str
    price: Money


class Product(ProductSummary):
    description: str | None = None
    quantity: int
    thumbnail: str | None = None
    image: str | None = None
    created_at: datetime
    updated_at: datetime


class ProductPage(BaseModel):
    """Paginated product listing."""

    page: int
    limit: int
    total_products: int
    total_pages: int
    products: list[Product]
