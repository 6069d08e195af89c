"""Cart and order pricing: subtotal, discount, tax and shipping."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP
from decimal import Decimal
from typing import Any

from crudapp.validation.engine import ensure_valid
from crudapp.validation.payloads import PRICING_RULES

CENT = Decimal("0.01")
ZERO = Decimal("0")

# query parameter -> PricingOptions attribute
PRICING_PARAMS = {"discount": "discount", "taxRate": "tax_rate", "shippingFee": "shipping_fee"}


@dataclass(frozen=True)
class PricingOptions:
    """Discount and tax as fractions in [0, 1]; shipping as a flat amount."""

    discount: Decimal = ZERO
    tax_rate: Decimal = ZERO
    shipping_fee: Decimal = ZERO


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    shipping_fee: Decimal
    total: Decimal


def _cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def price_lines(lines: Iterable[tuple[Decimal, int]], options: PricingOptions = PricingOptions()) -> PriceBreakdown:
    """Price ``(unit_price, quantity)`` lines.

    The discount applies to the subtotal and tax applies to the discounted
    amount; shipping is added last. Every amount is rounded half-up to cents.
    """
    subtotal = _cents(sum((unit_price * quantity for unit_price, quantity in lines), ZERO))
    discount = _cents(subtotal * options.discount)
    tax = _cents((subtotal - discount) * options.tax_rate)
    shipping_fee = _cents(options.shipping_fee)
    return PriceBreakdown(
        subtotal=subtotal,
        discount=discount,
        tax=tax,
        shipping_fee=shipping_fee,
        total=subtotal - discount + tax + shipping_fee,
    )


def _number_or_raw(raw: Any) -> Any:
    if not isinstance(raw, str):
        return raw
    try:
        return float(raw.strip())
    except ValueError:
        return raw


def pricing_from_query(raw_query: Mapping[str, Any]) -> PricingOptions:
    """Read ``discount``, ``taxRate`` and ``shippingFee`` from query-string values.

    Query values arrive as text; numeric text is parsed before validation so
    the numeric rules apply, anything else is rejected with the field message.
    """
    payload = {name: _number_or_raw(raw_query[name]) for name in PRICING_PARAMS if name in raw_query}
    value = ensure_valid(payload, PRICING_RULES)
    return PricingOptions(**{PRICING_PARAMS[name]: amount for name, amount in value.items()})
