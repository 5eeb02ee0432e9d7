"""SQLAlchemy ORM models.

Models represent database tables:
- variants: Purchasable device configurations (one row per SKU)
- users: Customers with current-order pointer and purchase history
- orders / order_items: Orders with immutable configuration snapshots
"""

from app.models.variant import Variant
from app.models.user import User
from app.models.order import Order, OrderItem

__all__ = ["Variant", "User", "Order", "OrderItem"]
