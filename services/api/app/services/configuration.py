"""Configuration aggregation and combination enumeration.

Pure functions over already-fetched variant records:

- build_option_set: distinct values per dimension + price range (what can be
  picked at all)
- enumerate_combinations: distinct full dimension tuples (what is actually
  stocked together)
- check_combination: is a (partial) selection co-stocked?

Dimensions are not orthogonal: a model can come in 128/256 and Black/White
while only 128-Black and 256-White exist. The Option Set answers "which
values exist", only the combinations answer "can I buy this".
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from app.services.dimensions import DeviceType, dimensions_for
from app.services.errors import InvalidConfigurationError
from app.services.ordering import order_values, sort_key
from app.services.values import DimensionValue, parse_value, values_equal


@dataclass(frozen=True)
class PriceRange:
    """Inclusive price range. Both bounds are None for an empty variant set."""

    min: float | None
    max: float | None


@dataclass(frozen=True)
class OptionSet:
    """Distinct observed values per applicable dimension for one model."""

    model: str
    device_type: DeviceType
    options: dict[str, list[Any]]
    price: PriceRange
    variant_count: int

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.options)
        payload["price"] = {"min": self.price.min, "max": self.price.max}
        return payload


@dataclass(frozen=True)
class Combination:
    """One stocked tuple of dimension values."""

    values: tuple[tuple[str, Any], ...]
    variant_count: int
    min_price: float

    def as_dict(self) -> dict[str, Any]:
        return dict(self.values)

    def get(self, dimension: str) -> Any:
        for name, value in self.values:
            if name == dimension:
                return value
        return None


def _applicable_selection(
    device_type: DeviceType,
    selection: Mapping[str, Any] | None,
) -> list[tuple[str, Any]]:
    """Selected (dimension, value) pairs that apply to the device type.

    Keys for other device types and empty values are dropped.
    """
    if not selection:
        return []
    pairs: list[tuple[str, Any]] = []
    for dimension in dimensions_for(device_type):
        value = selection.get(dimension)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        pairs.append((dimension, value))
    return pairs


def _for_model(variants: Iterable[Any], model: str, device_type: DeviceType) -> list[Any]:
    return [v for v in variants if v.model == model and v.device_type == device_type]


def build_option_set(
    variants: Iterable[Any],
    model: str,
    device_type: DeviceType,
    selection: Mapping[str, Any] | None = None,
) -> OptionSet:
    """Aggregate the legal configuration values of a model.

    Args:
        variants: Variant records (extra models/device types are ignored).
        model: Model name, exact match.
        device_type: Device type; decides which dimensions appear.
        selection: Optional already-chosen dimension values narrowing the set
            (e.g. {"condition": "Used"} -> which colors remain?).

    Returns:
        OptionSet with de-duplicated, ordered values and the price range.
    """
    dimensions = dimensions_for(device_type)
    chosen = _applicable_selection(device_type, selection)

    matching = [
        v
        for v in _for_model(variants, model, device_type)
        if all(values_equal(getattr(v, dim), wanted) for dim, wanted in chosen)
    ]

    options: dict[str, list[Any]] = {}
    for dimension in dimensions:
        seen: dict[DimensionValue, Any] = {}
        for variant in matching:
            raw = getattr(variant, dimension, None)
            if raw is None:
                continue
            parsed = parse_value(raw)
            seen.setdefault(parsed, parsed.to_native())
        options[dimension] = order_values(seen.values())

    prices = [v.price for v in matching]
    price = PriceRange(min=min(prices), max=max(prices)) if prices else PriceRange(min=None, max=None)

    return OptionSet(
        model=model,
        device_type=device_type,
        options=options,
        price=price,
        variant_count=len(matching),
    )


def _key_part(raw: Any) -> DimensionValue | None:
    return parse_value(raw) if raw is not None else None


def enumerate_combinations(
    variants: Iterable[Any],
    model: str,
    device_type: DeviceType,
) -> list[Combination]:
    """Group variants of a model by their full dimension tuple.

    Every returned combination is backed by at least one stored variant.
    The list order is deterministic but carries no meaning.
    """
    dimensions = dimensions_for(device_type)
    groups: dict[tuple[DimensionValue | None, ...], list[Any]] = {}

    for variant in _for_model(variants, model, device_type):
        key = tuple(_key_part(getattr(variant, dim, None)) for dim in dimensions)
        groups.setdefault(key, []).append(variant)

    combinations = [
        Combination(
            values=tuple(
                (dim, part.to_native() if part is not None else None)
                for dim, part in zip(dimensions, key)
            ),
            variant_count=len(members),
            min_price=min(m.price for m in members),
        )
        for key, members in groups.items()
    ]
    combinations.sort(key=lambda c: tuple(sort_key(value) if value is not None else (2,) for _, value in c.values))
    return combinations


def check_combination(
    combinations: list[Combination],
    device_type: DeviceType,
    selection: Mapping[str, Any],
) -> list[Combination]:
    """Check that a (partial) selection is actually stocked.

    Narrows the combinations one dimension at a time, in dimension order.

    Returns:
        Combinations compatible with the selection.

    Raises:
        InvalidConfigurationError: naming the first dimension whose value is
            not co-stocked with the dimensions chosen before it.
    """
    if not combinations:
        raise InvalidConfigurationError("model", message="Invalid configuration: no stocked combinations for model")

    remaining = combinations
    for dimension, wanted in _applicable_selection(device_type, selection):
        narrowed = [c for c in remaining if c.get(dimension) is not None and values_equal(c.get(dimension), wanted)]
        if not narrowed:
            available = order_values({parse_value(c.get(dimension)).to_native() for c in remaining if c.get(dimension) is not None})
            raise InvalidConfigurationError(
                dimension,
                requested=wanted,
                expected=available,
                message=f"Invalid configuration: {dimension} {wanted!r} is not available with the selected options",
            )
        remaining = narrowed
    return remaining
