"""User service: registration, profile updates and removal."""

import logging
from collections.abc import Mapping
from typing import Any

from app.models import Order, User
from app.models.user import generate_user_id
from app.services.errors import ConflictError, InvalidUpdateError, NotFoundError
from app.services.orders import list_orders_for_user
from app.stores.catalog import CatalogStore

logger = logging.getLogger("uvicorn.error")

UPDATABLE_USER_FIELDS = frozenset({"name", "email", "phone", "address"})


async def _ensure_email_free(store: CatalogStore, email: str, user_id: str | None = None) -> None:
    existing = await store.get_user_by_email(email)
    if existing is not None and existing.user_id != user_id:
        raise ConflictError(f"Email {email} is already registered", details={"field": "email"})


async def create_user(
    store: CatalogStore,
    name: str,
    email: str,
    phone: str | None = None,
    address: dict[str, Any] | None = None,
) -> User:
    await _ensure_email_free(store, email)
    user = User(
        user_id=generate_user_id(),
        name=name,
        email=email,
        phone=phone,
        address=address,
        purchase_history=[],
    )
    await store.add_user(user)
    logger.info(f"[users] created user_id={user.user_id}")
    return user


async def get_user(store: CatalogStore, user_id: str) -> User:
    user = await store.get_user(user_id)
    if user is None:
        raise NotFoundError("user", user_id)
    return user


async def update_user(store: CatalogStore, user_id: str, changes: Mapping[str, Any]) -> User:
    """Update profile fields.

    Raises:
        InvalidUpdateError: any field outside name/email/phone/address.
        NotFoundError: unknown user.
        ConflictError: email taken by another user.
    """
    invalid = [name for name in changes if name not in UPDATABLE_USER_FIELDS]
    if invalid:
        raise InvalidUpdateError(invalid)

    user = await get_user(store, user_id)
    if changes.get("email") and changes["email"].lower() != (user.email or "").lower():
        await _ensure_email_free(store, changes["email"], user_id=user.user_id)

    for name, value in changes.items():
        setattr(user, name, value)
    await store.refresh(user)
    logger.info(f"[users] updated user_id={user.user_id} fields={sorted(changes)}")
    return user


async def delete_user(store: CatalogStore, user_id: str) -> None:
    """Delete a user together with all of their orders."""
    user = await get_user(store, user_id)
    removed = await store.delete_orders_for_user(user.user_id)
    await store.delete_user(user)
    logger.info(f"[users] deleted user_id={user_id} orders_removed={removed}")


async def list_user_orders(store: CatalogStore, user_id: str) -> list[Order]:
    return await list_orders_for_user(store, user_id)
