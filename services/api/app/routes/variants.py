"""Catalog read endpoints.

GET  /v1/variants                     - Filtered, paginated listing
GET  /v1/variants/options             - Option Set of a model (optionally narrowed)
GET  /v1/variants/combinations        - Stocked dimension tuples of a model
POST /v1/variants/combinations/check  - Is a (partial) selection stocked?
GET  /v1/variants/lowest-price        - Cheapest variant per model
GET  /v1/variants/{id}                - Variant + Option Set of its model

Routers are thin: call services for business logic.
"""

from fastapi import APIRouter, Depends, Query

from app.schemas import (
    CombinationCheckRequest,
    CombinationCheckResponse,
    CombinationOut,
    CombinationsResponse,
    LowestPriceResponse,
    OptionSetResponse,
    VariantDetailResponse,
    VariantListResponse,
    VariantOut,
)
from app.services import catalog
from app.services.criteria import VariantCriteria
from app.services.errors import InvalidFieldError
from app.settings import get_settings
from app.stores.catalog import CatalogStore, get_catalog_store

router = APIRouter()


@router.get("", response_model=VariantListResponse)
async def list_variants(
    device_type: str | None = Query(default=None, alias="deviceType", examples=["Phone", "Laptop"]),
    model: str | None = Query(default=None, description="Case-insensitive substring"),
    color: str | None = Query(default=None, description="Case-insensitive substring"),
    cpu: str | None = Query(default=None, description="Case-insensitive substring"),
    condition: list[str] | None = Query(default=None, description="Any of (repeatable)"),
    battery: list[str] | None = Query(default=None),
    storage: list[str] | None = Query(default=None, examples=[["128", "256"]]),
    ram: list[str] | None = Query(default=None),
    connectivity: list[str] | None = Query(default=None),
    min_price: float | None = Query(default=None, alias="minPrice", ge=0),
    max_price: float | None = Query(default=None, alias="maxPrice", ge=0),
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1, description="Page size (capped by max_page_limit)"),
    store: CatalogStore = Depends(get_catalog_store),
) -> VariantListResponse:
    """List variants matching all given filters."""
    settings = get_settings()

    if min_price is not None and max_price is not None and min_price > max_price:
        raise InvalidFieldError("minPrice", "must not exceed maxPrice")

    criteria = VariantCriteria(
        device_type=catalog.parse_device_type(device_type) if device_type else None,
        model=model,
        color=color,
        cpu=cpu,
        condition=tuple(condition or ()),
        battery=tuple(battery or ()),
        storage=tuple(storage or ()),
        ram=tuple(ram or ()),
        connectivity=tuple(connectivity or ()),
        min_price=min_price,
        max_price=max_price,
    )
    page_limit = min(limit or settings.default_page_limit, settings.max_page_limit)

    result = await catalog.list_variants(store, criteria, page=page, limit=page_limit)
    return VariantListResponse(
        items=[VariantOut.from_variant(v) for v in result.items],
        count=len(result.items),
        total=result.total,
        page=result.page,
        pages=result.pages,
        limit=result.limit,
    )


@router.get("/options", response_model=OptionSetResponse)
async def get_options(
    model: str = Query(min_length=1, examples=["iPhone 13"]),
    device_type: str = Query(alias="deviceType", min_length=1),
    condition: str | None = Query(default=None),
    storage: str | None = Query(default=None),
    color: str | None = Query(default=None),
    battery: str | None = Query(default=None),
    cpu: str | None = Query(default=None),
    ram: str | None = Query(default=None),
    connectivity: str | None = Query(default=None),
    store: CatalogStore = Depends(get_catalog_store),
) -> OptionSetResponse:
    """Distinct values per dimension for a model.

    Any dimension passed as a query parameter narrows the set to variants
    having that value (e.g. condition=Used -> which storages remain?).
    """
    selection = {
        "condition": condition,
        "storage": storage,
        "color": color,
        "battery": battery,
        "cpu": cpu,
        "ram": ram,
        "connectivity": connectivity,
    }
    option_set = await catalog.get_option_set(
        store, model, device_type, {k: v for k, v in selection.items() if v is not None}
    )
    return OptionSetResponse.from_option_set(option_set)


@router.get("/combinations", response_model=CombinationsResponse)
async def get_combinations(
    model: str = Query(min_length=1),
    device_type: str = Query(alias="deviceType", min_length=1),
    store: CatalogStore = Depends(get_catalog_store),
) -> CombinationsResponse:
    """Every dimension tuple actually stocked for a model."""
    parsed_type = catalog.parse_device_type(device_type)
    combinations = await catalog.get_combinations(store, model, parsed_type)
    return CombinationsResponse(
        model=model,
        device_type=parsed_type.value,
        combinations=[CombinationOut.from_combination(c) for c in combinations],
        count=len(combinations),
    )


@router.post("/combinations/check", response_model=CombinationCheckResponse)
async def check_combination(
    request: CombinationCheckRequest,
    store: CatalogStore = Depends(get_catalog_store),
) -> CombinationCheckResponse:
    """Validate a (partial) selection. 400 INVALID_CONFIGURATION names the first bad dimension."""
    matches = await catalog.check_configuration(store, request.model, request.device_type, request.selection)
    return CombinationCheckResponse(
        matches=[CombinationOut.from_combination(c) for c in matches],
        count=len(matches),
    )


@router.get("/lowest-price", response_model=LowestPriceResponse)
async def get_lowest_price(store: CatalogStore = Depends(get_catalog_store)) -> LowestPriceResponse:
    """Cheapest variant of every model, flat and per device type."""
    selection = await catalog.get_lowest_price_variants(store)
    return LowestPriceResponse(
        variants=[VariantOut.from_variant(v) for v in selection.variants],
        by_device_type={
            bucket: [VariantOut.from_variant(v) for v in members]
            for bucket, members in selection.by_device_type.items()
        },
        count=selection.count,
    )


@router.get("/{variant_id}", response_model=VariantDetailResponse)
async def get_variant(
    variant_id: str,
    store: CatalogStore = Depends(get_catalog_store),
) -> VariantDetailResponse:
    variant, option_set = await catalog.get_variant_detail(store, variant_id)
    return VariantDetailResponse(
        variant=VariantOut.from_variant(variant),
        options=OptionSetResponse.from_option_set(option_set),
    )
