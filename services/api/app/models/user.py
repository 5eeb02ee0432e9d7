"""User model.

Holds the purchasing user's contact data, the "current order" pointer and
the purchase history (delivered orders).
"""

from datetime import datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.stores.postgres import Base


def generate_user_id() -> str:
    """Generate unique public user ID."""
    return str(uuid4())


class User(Base):
    """Customer placing orders."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        default=generate_user_id,
    )

    name: Mapped[str] = mapped_column(String(200))
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
    phone: Mapped[str | None] = mapped_column(String(50))
    address: Mapped[dict[str, Any] | None] = mapped_column(JSON)  # street/city/state/zip/country

    # Delivered order IDs, oldest first. Reassign (don't mutate) to persist changes.
    purchase_history: Mapped[list[str]] = mapped_column(JSON, default=list)

    # Current order pointer
    current_order_id: Mapped[str | None] = mapped_column(String(100), index=True)
    current_order_status: Mapped[str | None] = mapped_column(String(20))

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

    def clear_current_order(self) -> None:
        self.current_order_id = None
        self.current_order_status = None

    def __repr__(self) -> str:
        return f"<User {self.user_id} {self.email}>"
