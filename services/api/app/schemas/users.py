"""Schemas for user endpoints (/v1/users)."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, EmailStr, Field


class Address(BaseModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = Field(alias="zipCode", default=None)
    country: str | None = None

    model_config = {"populate_by_name": True}


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=50)
    address: Address | None = None


class UserUpdate(BaseModel):
    """Profile update. Unknown keys are kept so the service can reject them by name."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    address: Address | None = None

    model_config = {"extra": "allow"}


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    phone: str | None = None
    address: dict[str, Any] | None = None
    purchase_history: list[str] = Field(alias="purchaseHistory", default_factory=list)
    current_order_id: str | None = Field(alias="currentOrderId", default=None)
    current_order_status: str | None = Field(alias="currentOrderStatus", default=None)
    created_at: datetime | None = Field(alias="createdAt", default=None)
    updated_at: datetime | None = Field(alias="updatedAt", default=None)

    model_config = {"populate_by_name": True}

    @classmethod
    def from_user(cls, user: Any) -> "UserOut":
        return cls(
            id=user.user_id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            address=user.address,
            purchase_history=list(user.purchase_history or []),
            current_order_id=user.current_order_id,
            current_order_status=user.current_order_status,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
