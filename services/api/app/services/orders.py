"""Order service: placement, lifecycle and the user's current-order pointer.

create_order validates every line before writing anything. The order write
and the pointer write are two store calls; with the SQL store they share the
request's transaction.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from app.models import Order, OrderItem, User
from app.models.order import generate_order_id
from app.services.errors import (
    CatalogError,
    InvalidFieldError,
    InvalidStatusTransitionError,
    NotFoundError,
)
from app.services.order_status import OrderStatus
from app.services.order_validation import OrderLineRequest, validate_order_lines
from app.stores.catalog import CatalogStore

logger = logging.getLogger("uvicorn.error")


@dataclass
class UserOrders:
    """Orders of one user, newest first (admin listing)."""

    user_id: str
    user: User | None
    orders: list[Order] = field(default_factory=list)


def parse_status(raw: Any) -> OrderStatus:
    if isinstance(raw, OrderStatus):
        return raw
    if isinstance(raw, str):
        try:
            return OrderStatus(raw.strip().lower())
        except ValueError:
            pass
    allowed = ", ".join(s.value for s in OrderStatus)
    raise InvalidFieldError("status", f"{raw!r} is not one of {allowed}")


async def _get_user(store: CatalogStore, user_id: str) -> User:
    user = await store.get_user(user_id)
    if user is None:
        raise NotFoundError("user", user_id)
    return user


async def create_order(
    store: CatalogStore,
    user_id: str,
    lines: Sequence[OrderLineRequest],
    shipping_address: dict[str, Any] | None = None,
) -> Order:
    """Validate and persist an order, then point the user at it.

    Raises:
        InvalidFieldError: no lines, bad quantity or price.
        NotFoundError: unknown user or variant.
        InvalidConfigurationError / MissingRequiredFieldError: a line disagrees with its variant.
    """
    try:
        if not lines:
            raise InvalidFieldError("items", "at least one item is required")
        user = await _get_user(store, user_id)
        variants = await store.get_variants([line.variant_id for line in lines])
        validated = validate_order_lines(lines, variants)
    except CatalogError as e:
        logger.warning(f"[orders] rejected order for user_id={user_id}: {e}")
        raise

    order = Order(
        order_id=generate_order_id(),
        user_id=user.user_id,
        status=OrderStatus.PENDING,
        total_amount=validated.total_amount,
        shipping_address=shipping_address,
        items=[
            OrderItem(
                variant_id=line.variant_id,
                configuration=line.configuration,
                quantity=line.quantity,
                price_at_purchase=line.price_at_purchase,
            )
            for line in validated.lines
        ],
    )
    await store.add_order(order)

    user.current_order_id = order.order_id
    user.current_order_status = OrderStatus.PENDING.value
    await store.flush()

    logger.info(
        f"[orders] created order_id={order.order_id} user_id={user.user_id} "
        f"lines={len(validated.lines)} total={validated.total_amount:.2f}"
    )
    return order


async def get_order(store: CatalogStore, order_id: str) -> Order:
    order = await store.get_order(order_id)
    if order is None:
        raise NotFoundError("order", order_id)
    return order


async def list_orders_for_user(store: CatalogStore, user_id: str) -> list[Order]:
    await _get_user(store, user_id)
    return await store.find_orders(user_id=user_id)


async def list_orders_grouped_by_user(store: CatalogStore) -> list[UserOrders]:
    """All orders grouped per user; groups ordered by their newest order."""
    orders = await store.find_orders()
    groups: dict[str, UserOrders] = {}
    for order in orders:
        group = groups.setdefault(order.user_id, UserOrders(user_id=order.user_id, user=None))
        group.orders.append(order)

    users = await store.get_users(list(groups))
    for user_id, group in groups.items():
        group.user = users.get(user_id)
    return list(groups.values())


def _apply_status_to_user(user: User, order_id: str, status: OrderStatus) -> None:
    points_here = user.current_order_id == order_id

    if status == OrderStatus.DELIVERED:
        history = list(user.purchase_history or [])
        if order_id not in history:
            # Reassign so the JSON column change is tracked
            user.purchase_history = [*history, order_id]
        if points_here:
            user.clear_current_order()
    elif status == OrderStatus.CANCELLED:
        if points_here:
            user.clear_current_order()
    elif points_here:
        user.current_order_status = status.value


async def update_order_status(store: CatalogStore, order_id: str, status: Any) -> Order:
    """Move an order to a new status and keep the user's pointer in step.

    Raises:
        InvalidFieldError: unknown status.
        NotFoundError: unknown order.
        InvalidStatusTransitionError: the order is delivered or cancelled.
    """
    new_status = parse_status(status)
    order = await get_order(store, order_id)

    if order.status == new_status:
        return order
    if order.status.is_terminal:
        raise InvalidStatusTransitionError(order.order_id, order.status.value, new_status.value)

    previous = order.status
    order.status = new_status

    user = await store.get_user(order.user_id)
    if user is not None:
        _apply_status_to_user(user, order.order_id, new_status)
        await store.refresh(order, user)
    else:
        await store.refresh(order)

    logger.info(f"[orders] order_id={order.order_id} status {previous.value} -> {new_status.value}")
    return order


async def delete_order(store: CatalogStore, order_id: str) -> None:
    order = await get_order(store, order_id)
    cleared = await store.clear_current_order(order.order_id)
    await store.delete_order(order)
    logger.info(f"[orders] deleted order_id={order_id} cleared_pointers={cleared}")
