"""Error taxonomy for the catalog service.

Every error carries a stable code and the HTTP status it maps to; the app
installs one exception handler that renders them as ErrorResponse.
"""

from typing import Any


class CatalogError(Exception):
    """Base class for all catalog errors."""

    code = "CATALOG_ERROR"
    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"


class NotFoundError(CatalogError):
    """Referenced variant/user/order does not exist."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            f"{entity.capitalize()} {entity_id} not found",
            details={"entity": entity, "id": entity_id},
        )
        self.entity = entity
        self.entity_id = entity_id


class InvalidConfigurationError(CatalogError):
    """Requested dimension value disagrees with the stocked inventory."""

    code = "INVALID_CONFIGURATION"
    status_code = 400

    def __init__(self, field: str, requested: Any = None, expected: Any = None, message: str | None = None):
        super().__init__(
            message or f"Invalid configuration: {field} mismatch",
            details={"field": field, "requested": requested, "expected": expected},
        )
        self.field = field


class MissingRequiredFieldError(CatalogError):
    """A mandatory common or device-specific field is absent or empty."""

    code = "MISSING_REQUIRED_FIELD"
    status_code = 400

    def __init__(self, field: str, index: int | None = None, device_type: str | None = None):
        if device_type:
            message = f"{field} is required for {device_type}"
        else:
            message = f"{field} is required"
        if index is not None:
            message = f"{message} (item {index})"
        super().__init__(message, details={"field": field, "index": index, "device_type": device_type})
        self.field = field
        self.index = index


class InvalidFieldError(CatalogError):
    """A field is present but has an unusable value."""

    code = "INVALID_FIELD"
    status_code = 400

    def __init__(self, field: str, reason: str, index: int | None = None):
        message = f"Invalid {field}: {reason}"
        if index is not None:
            message = f"{message} (item {index})"
        super().__init__(message, details={"field": field, "index": index})
        self.field = field


class InvalidUpdateError(CatalogError):
    code = "INVALID_UPDATE"
    status_code = 400

    def __init__(self, fields: list[str]):
        super().__init__(
            f"Invalid updates: {', '.join(sorted(fields))}",
            details={"fields": sorted(fields)},
        )


class ConflictError(CatalogError):
    code = "CONFLICT"
    status_code = 409


class VariantInUseError(CatalogError):
    """Variant is referenced by an order line and can no longer change."""

    code = "VARIANT_IN_USE"
    status_code = 409

    def __init__(self, variant_id: str, fields: list[str] | None = None):
        super().__init__(
            f"Variant {variant_id} is referenced by existing orders",
            details={"variant_id": variant_id, "fields": fields or []},
        )


class InvalidStatusTransitionError(CatalogError):
    code = "INVALID_STATUS_TRANSITION"
    status_code = 409

    def __init__(self, order_id: str, current: str, requested: str):
        super().__init__(
            f"Order {order_id} is '{current}' and cannot move to '{requested}'",
            details={"order_id": order_id, "current": current, "requested": requested},
        )


class StoreUnavailableError(CatalogError):
    """The store did not respond (connection refused, timeout)."""

    code = "STORE_UNAVAILABLE"
    status_code = 503
