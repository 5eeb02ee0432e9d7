"""Tagged dimension values.

Some dimensions are stored as a number for one device type and as a string
for another (storage is 256 for a phone, "64GB" for a tablet). Clients send
whatever they have, so the same size can arrive as 256, 256.0 or "256".

Every comparison goes through parse_value():
- NumericValue: ints/floats (not bools) and strings that parse as a finite float
- TextValue: everything else, whitespace-stripped

Two values are equal when both are numeric and numerically equal, or when
their canonical text is identical.
"""

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class NumericValue:
    """A dimension value that is numerically parseable."""

    number: float

    def canonical_text(self) -> str:
        if self.number.is_integer():
            return str(int(self.number))
        return repr(self.number)

    def to_native(self) -> int | float:
        if self.number.is_integer():
            return int(self.number)
        return self.number


@dataclass(frozen=True)
class TextValue:
    """A dimension value that is not numerically parseable."""

    text: str

    def canonical_text(self) -> str:
        return self.text

    def to_native(self) -> str:
        return self.text


DimensionValue = NumericValue | TextValue


def _as_number(raw: Any) -> float | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        number = float(raw)
    elif isinstance(raw, str):
        stripped = raw.strip()
        if not stripped:
            return None
        try:
            number = float(stripped)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_value(raw: Any) -> DimensionValue:
    """Tag a raw value as numeric or text.

    Args:
        raw: Value as found in a stored record or a request.

    Returns:
        NumericValue if the value is numerically parseable, else TextValue.
    """
    if isinstance(raw, (NumericValue, TextValue)):
        return raw
    number = _as_number(raw)
    if number is not None:
        return NumericValue(number)
    return TextValue(str(raw).strip())


def is_numeric(raw: Any) -> bool:
    return isinstance(parse_value(raw), NumericValue)


def canonical_text(raw: Any) -> str:
    """Canonical string form (e.g. 256.0 -> "256", " 64GB " -> "64GB")."""
    return parse_value(raw).canonical_text()


def normalize(raw: Any) -> int | float | str:
    """Native Python value of the canonical form."""
    return parse_value(raw).to_native()


def values_equal(left: Any, right: Any) -> bool:
    """Compare two dimension values after normalizing both sides."""
    a = parse_value(left)
    b = parse_value(right)
    if isinstance(a, NumericValue) and isinstance(b, NumericValue):
        return a.number == b.number
    return a.canonical_text() == b.canonical_text()
