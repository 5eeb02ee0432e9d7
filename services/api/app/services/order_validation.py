"""Order line configuration validation.

Each requested line is checked against the authoritative variant record:
- condition, storage, color are required and must match (storage compared
  by normalized value: 256 == "256")
- laptops: cpu/ram must match when supplied
- tablets: connectivity must match when supplied

Validation is all-or-nothing: validate_order_lines raises on the first bad
line and returns nothing partial, so callers write only after it returns.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from app.services.dimensions import DeviceType, device_specific_dimensions
from app.services.errors import InvalidConfigurationError, InvalidFieldError, NotFoundError
from app.services.values import normalize, values_equal

REQUIRED_CONFIGURATION: tuple[str, ...] = ("condition", "storage", "color")

# Dimensions snapshotted on the order line (battery is not part of it)
SNAPSHOT_DIMENSIONS: dict[DeviceType, tuple[str, ...]] = {
    device_type: REQUIRED_CONFIGURATION + device_specific_dimensions(device_type)
    for device_type in DeviceType
}


@dataclass(frozen=True)
class OrderLineRequest:
    """One requested order line, as sent by the client."""

    variant_id: str
    configuration: Mapping[str, Any]
    quantity: int = 1
    price: float = 0.0


@dataclass(frozen=True)
class ValidatedLine:
    """An order line ready to persist. Never mutated after creation."""

    variant_id: str
    configuration: dict[str, Any]
    quantity: int
    price_at_purchase: float


@dataclass(frozen=True)
class ValidatedOrder:
    lines: list[ValidatedLine]
    total_amount: float


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_configuration(variant: Any, configuration: Mapping[str, Any]) -> dict[str, Any]:
    """Cross-check a requested configuration against a variant.

    Args:
        variant: The stored variant the line refers to.
        configuration: Requested dimension values.

    Returns:
        Configuration snapshot built from the variant's authoritative values.

    Raises:
        InvalidConfigurationError: condition/storage/color absent, or a
            supplied value disagrees with the variant.
    """
    # An absent required value counts as a mismatch
    for name in REQUIRED_CONFIGURATION:
        requested = configuration.get(name)
        if _is_blank(requested) or not values_equal(requested, getattr(variant, name)):
            raise InvalidConfigurationError(name, requested=requested, expected=normalize(getattr(variant, name)))

    # Device-specific dimensions are optional in the request; whatever is supplied must agree.
    for name in device_specific_dimensions(variant.device_type):
        requested = configuration.get(name)
        if _is_blank(requested):
            continue
        if not values_equal(requested, getattr(variant, name)):
            raise InvalidConfigurationError(name, requested=requested, expected=normalize(getattr(variant, name)))

    return {
        name: normalize(getattr(variant, name))
        for name in SNAPSHOT_DIMENSIONS[variant.device_type]
        if getattr(variant, name) is not None
    }


def validate_order_lines(
    lines: Sequence[OrderLineRequest],
    variants: Mapping[str, Any],
) -> ValidatedOrder:
    """Validate every line of an order and compute its total.

    Args:
        lines: Requested lines in request order.
        variants: Variant records keyed by variant_id (missing ids are absent).

    Returns:
        ValidatedOrder with immutable line snapshots and the total amount.

    Raises:
        NotFoundError: a line references an unknown variant.
        InvalidFieldError: quantity < 1, or a negative or non-finite price.
        InvalidConfigurationError: see validate_configuration.
    """
    validated: list[ValidatedLine] = []
    total = 0.0

    for index, line in enumerate(lines):
        if line.quantity < 1:
            raise InvalidFieldError("quantity", "must be at least 1", index=index)
        if not math.isfinite(line.price) or line.price < 0:
            raise InvalidFieldError("price", "must be a finite, non-negative number", index=index)

        variant = variants.get(line.variant_id)
        if variant is None:
            raise NotFoundError("variant", line.variant_id)

        snapshot = validate_configuration(variant, line.configuration)
        total += line.price * line.quantity
        validated.append(
            ValidatedLine(
                variant_id=line.variant_id,
                configuration=snapshot,
                quantity=line.quantity,
                price_at_purchase=line.price,
            )
        )

    return ValidatedOrder(lines=validated, total_amount=round(total, 2))
