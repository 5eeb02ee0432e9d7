"""SKU key derivation for variants.

A SKU key is a readable slug of everything that identifies a variant's
configuration:
    {device_type}-{model}-{condition}-{storage}-{color}-{battery}[-{cpu}][-{ram}][-{connectivity}]

Example: "laptop-macbook-air-m2-used-512-midnight-90-m2-8"

Keys are not unique: the same configuration can be stocked more than once
at different prices.
"""

import re
from collections.abc import Mapping
from typing import Any

from app.services.dimensions import DeviceType, dimensions_for
from app.services.values import canonical_text


def compute_sku_key(device_type: DeviceType, attrs: Mapping[str, Any]) -> str:
    """Compute a SKU key from variant attributes.

    Args:
        device_type: Device type of the variant.
        attrs: Mapping with "model" and the dimension values.

    Returns:
        SKU key string.

    Example:
        >>> compute_sku_key(DeviceType.PHONE, {"model": "iPhone 13", "condition": "New",
        ...     "storage": 128, "color": "Blue", "battery": "100%"})
        'phone-iphone-13-new-128-blue-100'
    """
    parts = [_normalize(device_type.value), _normalize(str(attrs.get("model") or ""))]

    for dimension in dimensions_for(device_type):
        value = attrs.get(dimension)
        if value is None:
            continue
        parts.append(_normalize(canonical_text(value)))

    return "-".join(p for p in parts if p)


def _normalize(value: str) -> str:
    """Normalize a string for key generation.

    - Lowercase
    - Replace spaces/underscores/dots with hyphens
    - Remove special characters
    - Collapse multiple hyphens
    """
    if not value:
        return ""

    result = value.lower().strip()
    result = re.sub(r"[\s_.]+", "-", result)
    result = re.sub(r"[^a-z0-9-]", "", result)
    result = re.sub(r"-+", "-", result)
    return result.strip("-")
