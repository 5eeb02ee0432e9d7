"""Deterministic ordering for mixed numeric/string configuration values.

Numbers first (ascending), then strings (lexicographic). The result depends
only on the multiset of inputs, never on the order they were discovered in.
"""

from collections.abc import Iterable
from typing import Any

from app.services.values import NumericValue, parse_value


def sort_key(raw: Any) -> tuple:
    """Sort key placing numerics before text.

    Numerically equal values (256 vs "256") are tie-broken on canonical text
    and then on type name and repr so the sort is total.
    """
    value = parse_value(raw)
    if isinstance(value, NumericValue):
        return (0, value.number, value.canonical_text(), type(raw).__name__, repr(raw))
    return (1, 0.0, value.canonical_text(), type(raw).__name__, repr(raw))


def order_values(values: Iterable[Any]) -> list[Any]:
    """Order configuration values for presentation.

    Args:
        values: Values of a single dimension (any iterable, duplicates kept).

    Returns:
        New list: numerically parseable values ascending by number, followed
        by the remaining values ascending lexicographically.
    """
    return sorted(values, key=sort_key)
