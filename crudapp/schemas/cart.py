"""Pydantic schemas for the shopping cart."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict

from crudapp.schemas.product import Money
from crudapp.schemas.product import ProductSummary


class CartLine(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product: ProductSummary
    quantity: int


class PriceBreakdown(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    subtotal: Money
    discount: Money
    tax: Money
    shipping_fee: Money
    total: Money


class CartView(BaseModel):
    """Cart lines with the undiscounted subtotal."""

    items: list[CartLine]
    subtotal: Money
