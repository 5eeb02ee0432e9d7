"""Schemas for variant endpoints (/v1/variants, /v1/admin/variants)."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.services.configuration import Combination, OptionSet
from app.services.values import normalize

Dimension = int | float | str


class VariantOut(BaseModel):
    """A stored variant. Storage/battery come back as numbers when numeric."""

    id: str
    device_type: str = Field(alias="deviceType")
    model: str
    sku_key: str = Field(alias="skuKey")
    price: float
    image: str | None = None
    condition: str
    battery: Dimension
    color: str
    storage: Dimension
    cpu: str | None = None
    ram: int | None = None
    connectivity: str | None = None
    created_at: datetime | None = Field(alias="createdAt", default=None)
    updated_at: datetime | None = Field(alias="updatedAt", default=None)

    model_config = {"populate_by_name": True}

    @classmethod
    def from_variant(cls, variant: Any) -> "VariantOut":
        return cls(
            id=variant.variant_id,
            device_type=variant.device_type.value,
            model=variant.model,
            sku_key=variant.sku_key,
            price=variant.price,
            image=variant.image,
            condition=variant.condition,
            battery=normalize(variant.battery),
            color=variant.color,
            storage=normalize(variant.storage),
            cpu=variant.cpu,
            ram=variant.ram,
            connectivity=variant.connectivity,
            created_at=variant.created_at,
            updated_at=variant.updated_at,
        )


class VariantListResponse(BaseModel):
    """Paginated variant listing."""

    items: list[VariantOut]
    count: int = Field(ge=0)
    total: int = Field(ge=0)
    page: int = Field(ge=1)
    pages: int = Field(ge=0)
    limit: int = Field(ge=1)


class PriceRangeOut(BaseModel):
    min: float | None = None
    max: float | None = None


class OptionSetResponse(BaseModel):
    """Distinct values per dimension of one model + its price range."""

    model: str
    device_type: str = Field(alias="deviceType")
    options: dict[str, list[Dimension]]
    price: PriceRangeOut
    variant_count: int = Field(alias="variantCount", ge=0)

    model_config = {"populate_by_name": True}

    @classmethod
    def from_option_set(cls, option_set: OptionSet) -> "OptionSetResponse":
        return cls(
            model=option_set.model,
            device_type=option_set.device_type.value,
            options=option_set.options,
            price=PriceRangeOut(min=option_set.price.min, max=option_set.price.max),
            variant_count=option_set.variant_count,
        )


class VariantDetailResponse(BaseModel):
    variant: VariantOut
    options: OptionSetResponse


class CombinationOut(BaseModel):
    dimensions: dict[str, Dimension | None]
    variant_count: int = Field(alias="variantCount")
    min_price: float = Field(alias="minPrice")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_combination(cls, combination: Combination) -> "CombinationOut":
        return cls(
            dimensions=combination.as_dict(),
            variant_count=combination.variant_count,
            min_price=combination.min_price,
        )


class CombinationsResponse(BaseModel):
    model: str
    device_type: str = Field(alias="deviceType")
    combinations: list[CombinationOut]
    count: int = Field(ge=0)

    model_config = {"populate_by_name": True}


class CombinationCheckRequest(BaseModel):
    """A (partial) selection to check against stocked combinations."""

    model: str = Field(min_length=1)
    device_type: str = Field(alias="deviceType", min_length=1)
    selection: dict[str, Any] = Field(default_factory=dict)

    model_config = {"populate_by_name": True}


class CombinationCheckResponse(BaseModel):
    valid: bool = True
    matches: list[CombinationOut]
    count: int = Field(ge=0)


class LowestPriceResponse(BaseModel):
    """Cheapest variant per model: flat list plus per-device-type buckets."""

    variants: list[VariantOut]
    by_device_type: dict[str, list[VariantOut]] = Field(alias="byDeviceType")
    count: int = Field(ge=0)

    model_config = {"populate_by_name": True}


class VariantUpdate(BaseModel):
    """Partial variant update. Only set fields are applied."""

    model: str | None = None
    price: float | None = None
    image: str | None = None
    condition: str | None = None
    battery: Dimension | None = None
    color: str | None = None
    storage: Dimension | None = None
    cpu: str | None = None
    ram: int | None = None
    connectivity: str | None = None

    model_config = {"extra": "forbid"}


class BulkInsertError(BaseModel):
    index: int
    variant_id: str | None = Field(alias="variantId", default=None)
    message: str

    model_config = {"populate_by_name": True}


class BulkInsertResponse(BaseModel):
    """Outcome of a bulk insert. 201 on full success, 207 on partial failure."""

    inserted_count: int = Field(alias="insertedCount", ge=0)
    failed_count: int = Field(alias="failedCount", ge=0)
    message: str
    errors: list[BulkInsertError] = Field(default_factory=list)

    model_config = {"populate_by_name": True}
