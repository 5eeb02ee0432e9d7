"""Device types and the configuration dimensions each of them carries.

Every variant has the common dimensions. Laptops add cpu/ram, tablets add
connectivity. Nothing else in the codebase should hard-code these lists.
"""

from enum import Enum


class DeviceType(Enum):
    """Kind of device a variant belongs to."""

    PHONE = "Phone"
    LAPTOP = "Laptop"
    TABLET = "Tablet"

    @classmethod
    def parse(cls, raw: object) -> "DeviceType | None":
        """Parse a device type label (case-insensitive, legacy labels accepted).

        Returns:
            DeviceType, or None if the label is unknown.
        """
        if isinstance(raw, DeviceType):
            return raw
        if not isinstance(raw, str):
            return None
        return _DEVICE_TYPE_LABELS.get(raw.strip().lower())

    @property
    def bucket(self) -> str:
        """Plural name used for grouped payloads ("Phones", "Laptops", ...)."""
        return f"{self.value}s"


# Legacy catalog labels from the first import format.
_DEVICE_TYPE_LABELS: dict[str, DeviceType] = {
    "phone": DeviceType.PHONE,
    "iphone": DeviceType.PHONE,
    "laptop": DeviceType.LAPTOP,
    "macbook": DeviceType.LAPTOP,
    "tablet": DeviceType.TABLET,
    "ipad": DeviceType.TABLET,
}

# Payload group name -> device type (bulk insert)
BUCKET_DEVICE_TYPES: dict[str, DeviceType] = {
    "Phones": DeviceType.PHONE,
    "Laptops": DeviceType.LAPTOP,
    "Tablets": DeviceType.TABLET,
    "iPhones": DeviceType.PHONE,
    "MacBooks": DeviceType.LAPTOP,
    "iPads": DeviceType.TABLET,
}

COMMON_DIMENSIONS: tuple[str, ...] = ("condition", "storage", "color", "battery")

DEVICE_DIMENSIONS: dict[DeviceType, tuple[str, ...]] = {
    DeviceType.PHONE: (),
    DeviceType.LAPTOP: ("cpu", "ram"),
    DeviceType.TABLET: ("connectivity",),
}

ALL_DIMENSIONS: tuple[str, ...] = COMMON_DIMENSIONS + ("cpu", "ram", "connectivity")

# Dimensions whose stored values are numbers (or may be)
NUMERIC_DIMENSIONS: frozenset[str] = frozenset({"storage", "ram"})


def dimensions_for(device_type: DeviceType) -> tuple[str, ...]:
    """All dimensions applicable to a device type, common ones first."""
    return COMMON_DIMENSIONS + DEVICE_DIMENSIONS[device_type]


def device_specific_dimensions(device_type: DeviceType) -> tuple[str, ...]:
    return DEVICE_DIMENSIONS[device_type]
