"""Variant filter criteria.

One criteria object is used both to build the SQL query (stores/catalog.py)
and to filter already-fetched records in memory (partial Option Set filters).

Predicate kinds:
- exact: model_exact, device_type
- substring (case-insensitive): model, color, cpu
- any-of (normalized equality): condition, battery, storage, ram, connectivity
- range (inclusive): min_price, max_price
"""

from dataclasses import dataclass, field
from typing import Any

from app.services.dimensions import DeviceType
from app.services.values import values_equal


@dataclass(frozen=True)
class VariantCriteria:
    """Filter over stored variants. Empty criteria match everything."""

    device_type: DeviceType | None = None
    model_exact: str | None = None
    model: str | None = None
    color: str | None = None
    cpu: str | None = None
    condition: tuple[Any, ...] = field(default_factory=tuple)
    battery: tuple[Any, ...] = field(default_factory=tuple)
    storage: tuple[Any, ...] = field(default_factory=tuple)
    ram: tuple[Any, ...] = field(default_factory=tuple)
    connectivity: tuple[Any, ...] = field(default_factory=tuple)
    min_price: float | None = None
    max_price: float | None = None

    SUBSTRING_FIELDS = ("model", "color", "cpu")
    ANY_OF_FIELDS = ("condition", "battery", "storage", "ram", "connectivity")

    def matches(self, record: Any) -> bool:
        """Check a record (ORM row or any object with variant attributes)."""
        if self.device_type is not None and record.device_type != self.device_type:
            return False
        if self.model_exact is not None and record.model != self.model_exact:
            return False

        for name in self.SUBSTRING_FIELDS:
            needle = getattr(self, name)
            if not needle:
                continue
            haystack = getattr(record, name, None)
            if haystack is None or needle.lower() not in str(haystack).lower():
                return False

        for name in self.ANY_OF_FIELDS:
            allowed = getattr(self, name)
            if not allowed:
                continue
            value = getattr(record, name, None)
            if value is None or not any(values_equal(value, a) for a in allowed):
                return False

        if self.min_price is not None and record.price < self.min_price:
            return False
        if self.max_price is not None and record.price > self.max_price:
            return False
        return True
