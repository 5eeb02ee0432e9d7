"""Catalog service: store access around the pure configuration engine.

Every call re-reads the store; nothing is cached. Routes stay thin and call
into this module with a CatalogStore bound to the request's session.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from app.models import Variant
from app.models.variant import generate_variant_id
from app.services.configuration import (
    Combination,
    OptionSet,
    build_option_set,
    check_combination,
    enumerate_combinations,
)
from app.services.criteria import VariantCriteria
from app.services.dimensions import (
    BUCKET_DEVICE_TYPES,
    COMMON_DIMENSIONS,
    DeviceType,
    device_specific_dimensions,
)
from app.services.errors import (
    InvalidFieldError,
    MissingRequiredFieldError,
    NotFoundError,
    VariantInUseError,
)
from app.services.selection import LowestPriceSelection, select_lowest_price
from app.services.sku import compute_sku_key
from app.services.values import NumericValue, canonical_text, parse_value, values_equal
from app.stores.catalog import BulkInsertResult, CatalogStore

logger = logging.getLogger("uvicorn.error")

# Fields a variant may change after creation (subject to the in-use rule)
UPDATABLE_FIELDS = ("model", "price", "image") + COMMON_DIMENSIONS + ("cpu", "ram", "connectivity")

# Fields that may change even when order lines reference the variant
FREELY_UPDATABLE_FIELDS = frozenset({"image"})


@dataclass
class VariantPage:
    """One page of a filtered variant listing."""

    items: list[Variant]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def parse_device_type(raw: Any, index: int | None = None) -> DeviceType:
    """Parse a device type or raise a caller error naming the field."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise MissingRequiredFieldError("device_type", index=index)
    device_type = DeviceType.parse(raw)
    if device_type is None:
        allowed = ", ".join(d.value for d in DeviceType)
        raise InvalidFieldError("device_type", f"{raw!r} is not one of {allowed}", index=index)
    return device_type


# ============================================================
# Reads
# ============================================================


async def list_variants(
    store: CatalogStore,
    criteria: VariantCriteria,
    page: int = 1,
    limit: int = 10,
) -> VariantPage:
    """Filtered, paginated variant listing."""
    page = max(1, page)
    limit = max(1, limit)
    items = await store.find_variants(criteria, offset=(page - 1) * limit, limit=limit)
    total = await store.count_variants(criteria)
    return VariantPage(items=items, total=total, page=page, limit=limit)


async def _model_variants(store: CatalogStore, model: str, device_type: DeviceType) -> list[Variant]:
    return await store.find_variants(VariantCriteria(model_exact=model, device_type=device_type))


async def get_option_set(
    store: CatalogStore,
    model: str,
    device_type: Any,
    selection: Mapping[str, Any] | None = None,
) -> OptionSet:
    """Option Set for (model, device_type), optionally narrowed by a partial selection."""
    parsed_type = parse_device_type(device_type)
    variants = await _model_variants(store, model, parsed_type)
    return build_option_set(variants, model, parsed_type, selection)


async def get_combinations(store: CatalogStore, model: str, device_type: Any) -> list[Combination]:
    """Stocked dimension tuples for (model, device_type)."""
    parsed_type = parse_device_type(device_type)
    variants = await _model_variants(store, model, parsed_type)
    return enumerate_combinations(variants, model, parsed_type)


async def check_configuration(
    store: CatalogStore,
    model: str,
    device_type: Any,
    selection: Mapping[str, Any],
) -> list[Combination]:
    """Combinations compatible with a (partial) selection.

    Raises:
        InvalidConfigurationError: naming the first dimension that is not co-stocked.
    """
    parsed_type = parse_device_type(device_type)
    combinations = await get_combinations(store, model, parsed_type)
    return check_combination(combinations, parsed_type, selection)


async def get_lowest_price_variants(store: CatalogStore) -> LowestPriceSelection:
    """Cheapest variant of every model, bucketed by device type."""
    variants = await store.find_variants()
    return select_lowest_price(variants)


async def get_variant(store: CatalogStore, variant_id: str) -> Variant:
    variant = await store.get_variant(variant_id)
    if variant is None:
        raise NotFoundError("variant", variant_id)
    return variant


async def get_variant_detail(store: CatalogStore, variant_id: str) -> tuple[Variant, OptionSet]:
    """A variant plus the Option Set of its model."""
    variant = await get_variant(store, variant_id)
    options = await get_option_set(store, variant.model, variant.device_type)
    return variant, options


# ============================================================
# Document validation
# ============================================================


def _required_text(doc: Mapping[str, Any], name: str, index: int | None, device_type: str | None = None) -> str:
    value = doc.get(name)
    if value is None or isinstance(value, (dict, list, bool)):
        if value is None:
            raise MissingRequiredFieldError(name, index=index, device_type=device_type)
        raise InvalidFieldError(name, "must be a string or number", index=index)
    text = canonical_text(value)
    if not text:
        raise MissingRequiredFieldError(name, index=index, device_type=device_type)
    return text


def validate_variant_document(
    doc: Any,
    index: int | None = None,
    expected_type: DeviceType | None = None,
) -> dict[str, Any]:
    """Validate one variant document before any write.

    Checks the common required fields, then the device-specific ones.
    Dimensions that do not apply to the device type are dropped.

    Args:
        doc: Raw document (as posted).
        index: Position in the batch, echoed in error messages.
        expected_type: Device type implied by the payload group, if any.

    Returns:
        Clean attribute dict ready for Variant(**attrs).

    Raises:
        MissingRequiredFieldError / InvalidFieldError naming the field.
    """
    if not isinstance(doc, Mapping):
        raise InvalidFieldError("item", "must be an object", index=index)

    device_type = parse_device_type(doc.get("device_type"), index=index)
    if expected_type is not None and device_type != expected_type:
        raise InvalidFieldError(
            "device_type",
            f"{device_type.value} listed under {expected_type.bucket}",
            index=index,
        )

    attrs: dict[str, Any] = {"device_type": device_type}
    attrs["model"] = _required_text(doc, "model", index)

    raw_price = doc.get("price")
    if raw_price is None:
        raise MissingRequiredFieldError("price", index=index)
    price = parse_value(raw_price) if not isinstance(raw_price, bool) else None
    if not isinstance(price, NumericValue) or price.number < 0:
        raise InvalidFieldError("price", "must be a non-negative number", index=index)
    attrs["price"] = price.number

    for name in COMMON_DIMENSIONS:
        attrs[name] = _required_text(doc, name, index)

    for name in device_specific_dimensions(device_type):
        attrs[name] = _required_text(doc, name, index, device_type=device_type.value)

    if "ram" in attrs:
        ram = parse_value(attrs["ram"])
        if not isinstance(ram, NumericValue) or not ram.number.is_integer() or ram.number <= 0:
            raise InvalidFieldError("ram", "must be a positive whole number", index=index)
        attrs["ram"] = int(ram.number)

    image = doc.get("image")
    attrs["image"] = str(image).strip() if image else None

    variant_id = doc.get("variant_id")
    attrs["variant_id"] = str(variant_id).strip() if variant_id else generate_variant_id()

    return attrs


def build_variant(attrs: Mapping[str, Any]) -> Variant:
    """Create a transient Variant (with its SKU key) from validated attributes."""
    variant = Variant(**attrs)
    variant.sku_key = compute_sku_key(attrs["device_type"], attrs)
    return variant


# ============================================================
# Writes
# ============================================================


async def bulk_insert_variants(
    store: CatalogStore,
    payload: Mapping[str, Any],
) -> BulkInsertResult:
    """Validate every grouped document, then insert unordered.

    Any invalid document rejects the whole batch before a single write.
    Store-side refusals (e.g. duplicate variant_id) do not abort the rest.
    """
    if not isinstance(payload, Mapping):
        raise InvalidFieldError("payload", "must be an object")

    unknown = [key for key in payload if key not in BUCKET_DEVICE_TYPES]
    if unknown:
        groups = ", ".join(sorted({d.bucket for d in DeviceType}))
        raise InvalidFieldError("payload", f"unknown groups {sorted(unknown)}; expected {groups}")

    documents: list[tuple[Any, DeviceType]] = []
    for group, items in payload.items():
        if items is None:
            continue
        if not isinstance(items, list):
            raise InvalidFieldError(group, "must be a list")
        documents.extend((item, BUCKET_DEVICE_TYPES[group]) for item in items)

    if not documents:
        raise InvalidFieldError("payload", "no variants provided")

    variants = [
        build_variant(validate_variant_document(doc, index=index, expected_type=device_type))
        for index, (doc, device_type) in enumerate(documents)
    ]

    result = await store.insert_variants(variants, continue_on_error=True)
    if result.failed:
        logger.warning(
            f"[variants] bulk insert partial: inserted={result.inserted_count} failed={result.failed_count}"
        )
    else:
        logger.info(f"[variants] bulk insert: inserted={result.inserted_count}")
    return result


async def create_variant(store: CatalogStore, doc: Mapping[str, Any]) -> Variant:
    variant = build_variant(validate_variant_document(doc))
    await store.add_variant(variant)
    logger.info(f"[variants] created variant_id={variant.variant_id} sku_key={variant.sku_key}")
    return variant


async def update_variant(store: CatalogStore, variant_id: str, changes: Mapping[str, Any]) -> Variant:
    """Apply changes to a variant.

    Raises:
        NotFoundError: unknown variant.
        InvalidFieldError / MissingRequiredFieldError: the result would be invalid.
        VariantInUseError: price/configuration change on a variant referenced by orders.
    """
    variant = await get_variant(store, variant_id)

    unknown = [name for name in changes if name not in UPDATABLE_FIELDS]
    if unknown:
        raise InvalidFieldError(", ".join(sorted(unknown)), "cannot be updated")

    current = {name: getattr(variant, name) for name in UPDATABLE_FIELDS}
    merged = {**current, **changes, "device_type": variant.device_type, "variant_id": variant.variant_id}
    attrs = validate_variant_document(merged)

    changed = [
        name
        for name in UPDATABLE_FIELDS
        if name in attrs and not _same(attrs[name], current[name])
    ]
    if not changed:
        return variant

    locked = [name for name in changed if name not in FREELY_UPDATABLE_FIELDS]
    if locked and await store.is_variant_referenced(variant.variant_id):
        raise VariantInUseError(variant.variant_id, locked)

    for name in changed:
        setattr(variant, name, attrs[name])
    variant.sku_key = compute_sku_key(variant.device_type, attrs)
    await store.refresh(variant)
    logger.info(f"[variants] updated variant_id={variant.variant_id} fields={changed}")
    return variant


def _same(new: Any, old: Any) -> bool:
    if new is None or old is None:
        return new is old
    return values_equal(new, old)


async def delete_variant(store: CatalogStore, variant_id: str) -> None:
    variant = await get_variant(store, variant_id)
    if await store.is_variant_referenced(variant.variant_id):
        raise VariantInUseError(variant.variant_id)
    await store.delete_variant(variant)
    logger.info(f"[variants] deleted variant_id={variant_id}")
