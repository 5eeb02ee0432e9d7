"""Shared fixtures: in-memory catalog store and an HTTP client wired to it."""

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.models import Order, User, Variant
from app.services.catalog import build_variant, validate_variant_document
from app.services.criteria import VariantCriteria
from app.services.errors import StoreUnavailableError
from app.stores.catalog import BulkInsertFailure, BulkInsertResult, get_catalog_store


class FakeCatalogStore:
    """CatalogStore double keeping ORM objects in lists.

    Assigns surrogate ids and timestamps the way the database would, and
    enforces the unique variant_id / email constraints.
    """

    def __init__(self) -> None:
        self.variants: list[Variant] = []
        self.users: list[User] = []
        self.orders: list[Order] = []
        self.fail_on_add_order = False
        self._next_id = 1
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def _stamp(self, obj: Any) -> None:
        obj.id = self._next_id
        self._next_id += 1
        self._clock += timedelta(seconds=1)
        obj.created_at = self._clock
        obj.updated_at = self._clock

    def seed(self, *variants: Variant) -> list[Variant]:
        for variant in variants:
            self._stamp(variant)
            self.variants.append(variant)
        return list(variants)

    async def flush(self) -> None:
        return None

    async def refresh(self, *objects: object) -> None:
        self._clock += timedelta(seconds=1)
        for obj in objects:
            obj.updated_at = self._clock

    # Variants

    async def find_variants(
        self,
        criteria: VariantCriteria | None = None,
        *,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Variant]:
        criteria = criteria or VariantCriteria()
        matching = [v for v in sorted(self.variants, key=lambda v: v.id) if criteria.matches(v)]
        end = None if limit is None else offset + limit
        return matching[offset:end]

    async def count_variants(self, criteria: VariantCriteria | None = None) -> int:
        return len(await self.find_variants(criteria))

    async def get_variant(self, variant_id: str) -> Variant | None:
        return next((v for v in self.variants if v.variant_id == variant_id), None)

    async def get_variants(self, variant_ids: Sequence[str]) -> dict[str, Variant]:
        return {v.variant_id: v for v in self.variants if v.variant_id in set(variant_ids)}

    async def add_variant(self, variant: Variant) -> Variant:
        self.seed(variant)
        return variant

    async def insert_variants(self, variants: Sequence[Variant], *, continue_on_error: bool = True) -> BulkInsertResult:
        result = BulkInsertResult()
        for index, variant in enumerate(variants):
            if await self.get_variant(variant.variant_id) is not None:
                result.failed.append(
                    BulkInsertFailure(
                        index=index,
                        variant_id=variant.variant_id,
                        message=f"duplicate key value violates unique constraint (variant_id)={variant.variant_id}",
                    )
                )
                if not continue_on_error:
                    break
                continue
            self.seed(variant)
            result.succeeded.append(variant)
        return result

    async def delete_variant(self, variant: Variant) -> None:
        self.variants.remove(variant)

    async def is_variant_referenced(self, variant_id: str) -> bool:
        return any(item.variant_id == variant_id for order in self.orders for item in order.items)

    # Users

    async def get_user(self, user_id: str) -> User | None:
        return next((u for u in self.users if u.user_id == user_id), None)

    async def get_user_by_email(self, email: str) -> User | None:
        return next((u for u in self.users if u.email.lower() == email.lower()), None)

    async def add_user(self, user: User) -> User:
        self._stamp(user)
        self.users.append(user)
        return user

    async def delete_user(self, user: User) -> None:
        self.users.remove(user)

    async def get_users(self, user_ids: Sequence[str]) -> dict[str, User]:
        return {u.user_id: u for u in self.users if u.user_id in set(user_ids)}

    # Orders

    async def add_order(self, order: Order) -> Order:
        if self.fail_on_add_order:
            raise StoreUnavailableError("Store unavailable: connection refused")
        self._stamp(order)
        for item in order.items:
            item.id = self._next_id
            self._next_id += 1
        self.orders.append(order)
        return order

    async def get_order(self, order_id: str) -> Order | None:
        return next((o for o in self.orders if o.order_id == order_id), None)

    async def find_orders(self, user_id: str | None = None) -> list[Order]:
        orders = [o for o in self.orders if user_id is None or o.user_id == user_id]
        return sorted(orders, key=lambda o: (o.created_at, o.id), reverse=True)

    async def delete_order(self, order: Order) -> None:
        self.orders.remove(order)

    async def delete_orders_for_user(self, user_id: str) -> int:
        doomed = [o for o in self.orders if o.user_id == user_id]
        for order in doomed:
            self.orders.remove(order)
        return len(doomed)

    async def clear_current_order(self, order_id: str) -> int:
        cleared = 0
        for user in self.users:
            if user.current_order_id == order_id:
                user.clear_current_order()
                cleared += 1
        return cleared


def make_variant(**fields: Any) -> Variant:
    """Build a validated transient variant; defaults describe a phone."""
    doc: dict[str, Any] = {
        "device_type": "Phone",
        "model": "iPhone 13",
        "condition": "New",
        "storage": 128,
        "color": "Blue",
        "battery": "100%",
        "price": 500,
    }
    doc.update(fields)
    return build_variant(validate_variant_document(doc))


def make_laptop(**fields: Any) -> Variant:
    doc: dict[str, Any] = {
        "device_type": "Laptop",
        "model": "MacBook Air M2",
        "condition": "New",
        "storage": 256,
        "color": "Midnight",
        "battery": "100%",
        "cpu": "M2",
        "ram": 8,
        "price": 999,
    }
    doc.update(fields)
    return make_variant(**doc)


def make_tablet(**fields: Any) -> Variant:
    doc: dict[str, Any] = {
        "device_type": "Tablet",
        "model": "iPad Air",
        "condition": "New",
        "storage": "64GB",
        "color": "Space Gray",
        "battery": "100%",
        "connectivity": "WiFi",
        "price": 549,
    }
    doc.update(fields)
    return make_variant(**doc)


@pytest.fixture
def store() -> FakeCatalogStore:
    return FakeCatalogStore()


@pytest.fixture
async def client(store: FakeCatalogStore):
    """Test client with the catalog store swapped for the in-memory one."""

    async def override_store():
        yield store

    app.dependency_overrides[get_catalog_store] = override_store
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
