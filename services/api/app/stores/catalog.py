"""Catalog store: variants, users and orders over one SQLAlchemy session.

This is the only place that builds queries. It does no validation and no
business logic; services hand it ORM objects and get ORM objects back.

In-place updates: mutate the ORM object, then call flush(). JSON columns
must be reassigned (not mutated) for the change to be picked up.
"""

from collections.abc import AsyncGenerator, Sequence
from dataclasses import dataclass, field

from sqlalchemy import ColumnElement, exists, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Order, OrderItem, User, Variant
from app.services.criteria import VariantCriteria
from app.services.values import NumericValue, canonical_text, parse_value
from app.stores.postgres import get_session


@dataclass
class BulkInsertFailure:
    """One document the store refused."""

    index: int
    variant_id: str | None
    message: str


@dataclass
class BulkInsertResult:
    """Outcome of an unordered bulk insert: some may succeed, some may fail."""

    succeeded: list[Variant] = field(default_factory=list)
    failed: list[BulkInsertFailure] = field(default_factory=list)

    @property
    def inserted_count(self) -> int:
        return len(self.succeeded)

    @property
    def failed_count(self) -> int:
        return len(self.failed)


def _criteria_clauses(criteria: VariantCriteria) -> list[ColumnElement[bool]]:
    """Translate VariantCriteria into WHERE clauses."""
    clauses: list[ColumnElement[bool]] = []

    if criteria.device_type is not None:
        clauses.append(Variant.device_type == criteria.device_type)
    if criteria.model_exact is not None:
        clauses.append(Variant.model == criteria.model_exact)

    # Case-insensitive substring
    if criteria.model:
        clauses.append(Variant.model.icontains(criteria.model, autoescape=True))
    if criteria.color:
        clauses.append(Variant.color.icontains(criteria.color, autoescape=True))
    if criteria.cpu:
        clauses.append(Variant.cpu.icontains(criteria.cpu, autoescape=True))

    # Any-of, compared on canonical text
    if criteria.condition:
        clauses.append(Variant.condition.in_([canonical_text(v) for v in criteria.condition]))
    if criteria.battery:
        clauses.append(Variant.battery.in_([canonical_text(v) for v in criteria.battery]))
    if criteria.storage:
        clauses.append(Variant.storage.in_([canonical_text(v) for v in criteria.storage]))
    if criteria.connectivity:
        clauses.append(Variant.connectivity.in_([canonical_text(v) for v in criteria.connectivity]))
    if criteria.ram:
        ram_values = [parse_value(v) for v in criteria.ram]
        clauses.append(
            Variant.ram.in_([int(v.number) for v in ram_values if isinstance(v, NumericValue) and v.number.is_integer()])
        )

    # Inclusive price range
    if criteria.min_price is not None:
        clauses.append(Variant.price >= criteria.min_price)
    if criteria.max_price is not None:
        clauses.append(Variant.price <= criteria.max_price)

    return clauses


class CatalogStore:
    """Store collaborator bound to one session (one request)."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def flush(self) -> None:
        await self.session.flush()

    async def refresh(self, *objects: object) -> None:
        """Flush pending changes and reload server-side values (updated_at)."""
        await self.session.flush()
        for obj in objects:
            await self.session.refresh(obj)

    # ============================================================
    # Variants
    # ============================================================

    async def find_variants(
        self,
        criteria: VariantCriteria | None = None,
        *,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Variant]:
        """Variants matching criteria, in store order (insertion order)."""
        query = select(Variant).where(*_criteria_clauses(criteria or VariantCriteria())).order_by(Variant.id)
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_variants(self, criteria: VariantCriteria | None = None) -> int:
        query = select(func.count(Variant.id)).where(*_criteria_clauses(criteria or VariantCriteria()))
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def get_variant(self, variant_id: str) -> Variant | None:
        result = await self.session.execute(select(Variant).where(Variant.variant_id == variant_id))
        return result.scalar_one_or_none()

    async def get_variants(self, variant_ids: Sequence[str]) -> dict[str, Variant]:
        """Variants keyed by variant_id; unknown ids are simply absent."""
        if not variant_ids:
            return {}
        result = await self.session.execute(select(Variant).where(Variant.variant_id.in_(set(variant_ids))))
        return {v.variant_id: v for v in result.scalars().all()}

    async def add_variant(self, variant: Variant) -> Variant:
        self.session.add(variant)
        await self.session.flush()
        return variant

    async def insert_variants(
        self,
        variants: Sequence[Variant],
        *,
        continue_on_error: bool = True,
    ) -> BulkInsertResult:
        """Insert variants one savepoint each.

        With continue_on_error a refused document does not stop the batch;
        otherwise insertion stops at the first failure (earlier rows stay).
        """
        result = BulkInsertResult()
        for index, variant in enumerate(variants):
            try:
                async with self.session.begin_nested():
                    self.session.add(variant)
            except IntegrityError as e:
                result.failed.append(
                    BulkInsertFailure(index=index, variant_id=variant.variant_id, message=str(e.orig))
                )
                if not continue_on_error:
                    break
            else:
                result.succeeded.append(variant)
        return result

    async def delete_variant(self, variant: Variant) -> None:
        await self.session.delete(variant)
        await self.session.flush()

    async def is_variant_referenced(self, variant_id: str) -> bool:
        """True if any order line points at the variant."""
        result = await self.session.execute(select(exists().where(OrderItem.variant_id == variant_id)))
        return bool(result.scalar())

    # ============================================================
    # Users
    # ============================================================

    async def get_user(self, user_id: str) -> User | None:
        result = await self.session.execute(select(User).where(User.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(func.lower(User.email) == email.lower()))
        return result.scalar_one_or_none()

    async def add_user(self, user: User) -> User:
        self.session.add(user)
        await self.session.flush()
        return user

    async def delete_user(self, user: User) -> None:
        await self.session.delete(user)
        await self.session.flush()

    # ============================================================
    # Orders
    # ============================================================

    async def add_order(self, order: Order) -> Order:
        self.session.add(order)
        await self.session.flush()
        return order

    async def get_order(self, order_id: str) -> Order | None:
        result = await self.session.execute(select(Order).where(Order.order_id == order_id))
        return result.scalar_one_or_none()

    async def find_orders(self, user_id: str | None = None) -> list[Order]:
        """Orders, newest first, optionally for one user."""
        query = select(Order).order_by(Order.created_at.desc(), Order.id.desc())
        if user_id is not None:
            query = query.where(Order.user_id == user_id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_users(self, user_ids: Sequence[str]) -> dict[str, User]:
        if not user_ids:
            return {}
        result = await self.session.execute(select(User).where(User.user_id.in_(set(user_ids))))
        return {u.user_id: u for u in result.scalars().all()}

    async def delete_order(self, order: Order) -> None:
        await self.session.delete(order)
        await self.session.flush()

    async def delete_orders_for_user(self, user_id: str) -> int:
        orders = await self.find_orders(user_id=user_id)
        for order in orders:
            await self.session.delete(order)
        await self.session.flush()
        return len(orders)

    async def clear_current_order(self, order_id: str) -> int:
        """Unset every user's current-order pointer that references order_id."""
        result = await self.session.execute(
            update(User)
            .where(User.current_order_id == order_id)
            .values(current_order_id=None, current_order_status=None)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0


async def get_catalog_store() -> AsyncGenerator[CatalogStore, None]:
    """FastAPI dependency: one store (one session, one transaction) per request."""
    async with get_session() as session:
        yield CatalogStore(session)
