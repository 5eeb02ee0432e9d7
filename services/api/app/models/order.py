"""Order and order line models.

An order line stores a snapshot of the configuration and the price at
purchase time; it does not follow later changes to the variant.
"""

from datetime import datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Enum, Float, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.services.order_status import OrderStatus
from app.stores.postgres import Base


def generate_order_id() -> str:
    """Generate unique public order ID."""
    return str(uuid4())


class Order(Base):
    """Order placed by a user."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(primary_key=True)

    order_id: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        default=generate_order_id,
    )

    user_id: Mapped[str] = mapped_column(ForeignKey("users.user_id", ondelete="CASCADE"), index=True)

    status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus),
        default=OrderStatus.PENDING,
        index=True,
    )
    total_amount: Mapped[float] = mapped_column(Float)
    shipping_address: Mapped[dict[str, Any] | None] = mapped_column(JSON)

    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItem.id",
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Order {self.order_id} {self.status.value} ${self.total_amount:.2f}>"


class OrderItem(Base):
    """Immutable order line."""

    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(primary_key=True)

    order_pk: Mapped[int] = mapped_column(ForeignKey("orders.id", ondelete="CASCADE"), index=True)
    # Variants referenced by order lines cannot be deleted
    variant_id: Mapped[str] = mapped_column(ForeignKey("variants.variant_id", ondelete="RESTRICT"), index=True)

    configuration: Mapped[dict[str, Any]] = mapped_column(JSON)  # condition/storage/color[/cpu/ram][/connectivity]
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    price_at_purchase: Mapped[float] = mapped_column(Float)

    order: Mapped[Order] = relationship(back_populates="items")

    def __repr__(self) -> str:
        return f"<OrderItem {self.variant_id} x{self.quantity}>"
