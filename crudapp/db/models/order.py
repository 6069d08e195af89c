"""SQLAlchemy models for orders and their line items."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import CheckConstraint
from sqlalchemy import DateTime
from sqlalchemy import ForeignKey
from sqlalchemy import Index
from sqlalchemy import Integer
from sqlalchemy import Numeric
from sqlalchemy import PrimaryKeyConstraint
from sqlalchemy import String
from sqlalchemy import Uuid
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import mapped_column
from sqlalchemy.orm import relationship

from crudapp.db.models.product import MONEY
from crudapp.db.models.product import Product
from crudapp.db.models.user import Base
from crudapp.db.models.user import utcnow

RATE = Numeric(5, 4)
TOTAL = Numeric(18, 2)


class OrderStatusEnum(str, Enum):
    PROCESSING = "processing"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


ORDER_STATUSES = tuple(status.value for status in OrderStatusEnum)


class Order(Base):
    """Checked-out cart with the pricing applied at checkout time."""

    __tablename__ = "orders"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="pk_orders"),
        CheckConstraint(
            "status IN ('processing', 'delivered', 'cancelled')",
            name="ck_orders_status",
        ),
        Index("ix_orders_user_id_created_at", "user_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", name="fk_orders_user_id_users", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=OrderStatusEnum.PROCESSING.value,
    )
    discount: Mapped[Decimal] = mapped_column(RATE, nullable=False, default=Decimal("0"))
    tax_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False, default=Decimal("0"))
    shipping_fee: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    subtotal: Mapped[Decimal] = mapped_column(TOTAL, nullable=False)
    total: Mapped[Decimal] = mapped_column(TOTAL, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    items: Mapped[list["OrderItem"]] = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
    )


class OrderItem(Base):
    """Product line of an order with the unit price charged."""

    __tablename__ = "order_items"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="pk_order_items"),
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("orders.id", name="fk_order_items_order_id_orders", ondelete="CASCADE"),
        nullable=False,
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("products.id", name="fk_order_items_product_id_products"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    order: Mapped[Order] = relationship(Order, back_populates="items")
    product: Mapped[Product] = relationship(Product)
