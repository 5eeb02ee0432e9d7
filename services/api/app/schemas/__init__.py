"""Pydantic schemas for API request/response validation."""

from app.schemas.common import ErrorDetail, ErrorResponse
from app.schemas.orders import (
    GroupedOrdersResponse,
    OrderCreate,
    OrderLineIn,
    OrderListResponse,
    OrderOut,
    OrderStatusUpdate,
    UserOrdersOut,
)
from app.schemas.users import Address, UserCreate, UserOut, UserUpdate
from app.schemas.variants import (
    BulkInsertError,
    BulkInsertResponse,
    CombinationCheckRequest,
    CombinationCheckResponse,
    CombinationOut,
    CombinationsResponse,
    LowestPriceResponse,
    OptionSetResponse,
    VariantDetailResponse,
    VariantListResponse,
    VariantOut,
    VariantUpdate,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "GroupedOrdersResponse",
    "OrderCreate",
    "OrderLineIn",
    "OrderListResponse",
    "OrderOut",
    "OrderStatusUpdate",
    "UserOrdersOut",
    "Address",
    "UserCreate",
    "UserOut",
    "UserUpdate",
    "BulkInsertError",
    "BulkInsertResponse",
    "CombinationCheckRequest",
    "CombinationCheckResponse",
    "CombinationOut",
    "CombinationsResponse",
    "LowestPriceResponse",
    "OptionSetResponse",
    "VariantDetailResponse",
    "VariantListResponse",
    "VariantOut",
    "VariantUpdate",
]
