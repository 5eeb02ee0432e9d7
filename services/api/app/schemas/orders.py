"""Schemas for order endpoints (/v1/orders, /v1/admin/orders)."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.schemas.users import Address


class OrderLineIn(BaseModel):
    """Requested order line."""

    product_id: str = Field(alias="productId", min_length=1)
    configuration: dict[str, Any] = Field(default_factory=dict)
    quantity: int = Field(default=1, ge=1)
    price: float = Field(ge=0, allow_inf_nan=False)

    model_config = {"populate_by_name": True}


class OrderCreate(BaseModel):
    user_id: str = Field(alias="userId", min_length=1)
    items: list[OrderLineIn]
    shipping_address: Address | None = Field(alias="shippingAddress", default=None)

    model_config = {"populate_by_name": True}


class OrderStatusUpdate(BaseModel):
    status: str


class OrderLineOut(BaseModel):
    product_id: str = Field(alias="productId")
    configuration: dict[str, Any]
    quantity: int
    price_at_purchase: float = Field(alias="priceAtPurchase")

    model_config = {"populate_by_name": True}


class OrderOut(BaseModel):
    id: str
    user_id: str = Field(alias="userId")
    status: str
    total_amount: float = Field(alias="totalAmount")
    shipping_address: dict[str, Any] | None = Field(alias="shippingAddress", default=None)
    items: list[OrderLineOut]
    created_at: datetime | None = Field(alias="createdAt", default=None)
    updated_at: datetime | None = Field(alias="updatedAt", default=None)

    model_config = {"populate_by_name": True}

    @classmethod
    def from_order(cls, order: Any) -> "OrderOut":
        return cls(
            id=order.order_id,
            user_id=order.user_id,
            status=order.status.value,
            total_amount=order.total_amount,
            shipping_address=order.shipping_address,
            items=[
                OrderLineOut(
                    product_id=item.variant_id,
                    configuration=item.configuration,
                    quantity=item.quantity,
                    price_at_purchase=item.price_at_purchase,
                )
                for item in order.items
            ],
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponse(BaseModel):
    orders: list[OrderOut]
    count: int = Field(ge=0)


class UserOrdersOut(BaseModel):
    user_id: str = Field(alias="userId")
    name: str | None = None
    email: str | None = None
    orders: list[OrderOut]
    count: int = Field(ge=0)

    model_config = {"populate_by_name": True}


class GroupedOrdersResponse(BaseModel):
    """Admin listing: orders grouped per user."""

    users: list[UserOrdersOut]
    total_orders: int = Field(alias="totalOrders", ge=0)

    model_config = {"populate_by_name": True}
