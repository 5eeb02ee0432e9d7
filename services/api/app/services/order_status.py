"""Order lifecycle statuses."""

from enum import Enum


class OrderStatus(Enum):
    """Order status. delivered and cancelled are terminal."""

    PENDING = "pending"  # Created, not yet handled
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"  # Moves to purchase history
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})
