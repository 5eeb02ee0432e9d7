"""Lowest-price representative per model.

Selection logic:
1. Stable sort of all variants by price ASC
2. First variant seen per model wins (minimum by construction; ties go to
   the earliest record in store order)
3. Presentation order: device_type ASC, then price ASC
4. Partition into per-device-type buckets + flat list
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from app.services.dimensions import DeviceType


@dataclass
class LowestPriceSelection:
    """One variant per model, flat and bucketed by device type."""

    variants: list[Any] = field(default_factory=list)
    by_device_type: dict[str, list[Any]] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.variants)


def select_lowest_price(variants: Iterable[Any]) -> LowestPriceSelection:
    """Pick the cheapest variant of every model.

    Args:
        variants: Variant records in store order.

    Returns:
        LowestPriceSelection with exactly one variant per distinct model.
    """
    by_price = sorted(variants, key=lambda v: v.price)

    cheapest: dict[str, Any] = {}
    for variant in by_price:
        cheapest.setdefault(variant.model, variant)

    chosen = sorted(cheapest.values(), key=lambda v: (v.device_type.value, v.price))

    buckets: dict[str, list[Any]] = {device_type.bucket: [] for device_type in DeviceType}
    for variant in chosen:
        buckets[variant.device_type.bucket].append(variant)

    return LowestPriceSelection(variants=chosen, by_device_type=buckets)
