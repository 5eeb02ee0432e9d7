"""Variant model.

A Variant is one purchasable SKU:
device_type + model + condition + storage + color + battery
(+ cpu/ram for laptops, + connectivity for tablets)

Storage is persisted in canonical text form ("256", "64GB") so 256, 256.0
and "256" are stored identically; it is returned as a number when numeric.
"""

from datetime import datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import DateTime, Enum, Float, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, validates

from app.services.dimensions import DeviceType
from app.services.values import canonical_text, normalize
from app.stores.postgres import Base


def generate_variant_id() -> str:
    """Generate unique public variant ID."""
    return str(uuid4())


class Variant(Base):
    """One purchasable device configuration."""

    __tablename__ = "variants"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Public variant ID (used in URLs and order lines)
    variant_id: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        default=generate_variant_id,
    )

    device_type: Mapped[DeviceType] = mapped_column(Enum(DeviceType), index=True)
    model: Mapped[str] = mapped_column(String(200), index=True)  # e.g., "MacBook Air M2"
    sku_key: Mapped[str] = mapped_column(String(300), index=True)

    price: Mapped[float] = mapped_column(Float, index=True)
    image: Mapped[str | None] = mapped_column(Text)

    # Common dimensions
    condition: Mapped[str] = mapped_column(String(50))  # New, Used, Refurbished
    battery: Mapped[str] = mapped_column(String(50))  # e.g., "100%", "85"
    color: Mapped[str] = mapped_column(String(100))
    storage: Mapped[str] = mapped_column(String(50))  # canonical text: "256", "64GB"

    # Laptops only
    cpu: Mapped[str | None] = mapped_column(String(100))
    ram: Mapped[int | None] = mapped_column(Integer)

    # Tablets only
    connectivity: Mapped[str | None] = mapped_column(String(100))  # WiFi, WiFi + Cellular

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    @validates("storage")
    def _canonical_storage(self, key: str, value: Any) -> str:
        return canonical_text(value)

    @validates("battery")
    def _battery_as_text(self, key: str, value: Any) -> str:
        return canonical_text(value)

    @property
    def storage_value(self) -> int | float | str:
        """Storage as a number when numeric, else the stored text."""
        return normalize(self.storage)

    def __repr__(self) -> str:
        return f"<Variant {self.variant_id} {self.sku_key} ${self.price:.2f}>"
