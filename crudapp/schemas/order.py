"""Pydantic schemas for orders."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict

from crudapp.schemas.product import Money
from crudapp.schemas.product import ProductSummary


class OrderItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: UUID
    quantity: int
    unit_price: Money
    product: ProductSummary


class Order(BaseModel):
    """Order with its items and the pricing applied at checkout."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    status: str
    discount: Money
    tax_rate: Money
    shipping_fee: Money
    subtotal: Money
    total: Money
    items: list[OrderItem]
    created_at: datetime
    updated_at: datetime


class OrderPage(BaseModel):
    """Paginated order listing."""

    page: int
    limit: int
    total_orders: int
    total_pages: int
    orders: list[Order]
