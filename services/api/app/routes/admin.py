"""Admin endpoints for catalog management.

POST   /v1/admin/variants/bulk  - Grouped bulk insert (Phones/Laptops/Tablets)
POST   /v1/admin/variants       - Create one variant
PATCH  /v1/admin/variants/{id}  - Update a variant
DELETE /v1/admin/variants/{id}  - Delete a variant
GET    /v1/admin/orders         - All orders grouped by user

In production, consider adding authentication (API key or admin token).
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status
from fastapi.responses import JSONResponse

from app.schemas import (
    BulkInsertError,
    BulkInsertResponse,
    GroupedOrdersResponse,
    OrderOut,
    UserOrdersOut,
    VariantOut,
    VariantUpdate,
)
from app.services import catalog, orders
from app.settings import get_settings
from app.stores.catalog import CatalogStore, get_catalog_store

router = APIRouter()


@router.post("/variants/bulk", response_model=BulkInsertResponse, status_code=status.HTTP_201_CREATED)
async def bulk_insert_variants(
    payload: dict[str, Any] = Body(
        ...,
        examples=[{"Phones": [{"device_type": "Phone", "model": "iPhone 13", "price": 499}]}],
    ),
    store: CatalogStore = Depends(get_catalog_store),
) -> JSONResponse:
    """Insert grouped variant documents.

    Every document is validated first; one bad document rejects the batch
    (400). Store-side refusals do not stop the rest: the response is 207
    with the counts and a sample of the per-document errors.
    """
    result = await catalog.bulk_insert_variants(store, payload)
    total = result.inserted_count + result.failed_count

    if result.failed:
        sample = result.failed[: get_settings().bulk_error_sample_size]
        body = BulkInsertResponse(
            inserted_count=result.inserted_count,
            failed_count=result.failed_count,
            message=f"Inserted {result.inserted_count} of {total} variants; {result.failed_count} failed",
            errors=[BulkInsertError(index=f.index, variant_id=f.variant_id, message=f.message) for f in sample],
        )
        status_code = status.HTTP_207_MULTI_STATUS
    else:
        body = BulkInsertResponse(
            inserted_count=result.inserted_count,
            failed_count=0,
            message=f"Inserted {result.inserted_count} variants",
        )
        status_code = status.HTTP_201_CREATED

    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))


@router.post("/variants", response_model=VariantOut, status_code=status.HTTP_201_CREATED)
async def create_variant(
    payload: dict[str, Any] = Body(...),
    store: CatalogStore = Depends(get_catalog_store),
) -> VariantOut:
    variant = await catalog.create_variant(store, payload)
    return VariantOut.from_variant(variant)


@router.patch("/variants/{variant_id}", response_model=VariantOut)
async def update_variant(
    variant_id: str,
    request: VariantUpdate,
    store: CatalogStore = Depends(get_catalog_store),
) -> VariantOut:
    """Update a variant. Only image may change once orders reference it."""
    variant = await catalog.update_variant(store, variant_id, request.model_dump(exclude_unset=True))
    return VariantOut.from_variant(variant)


@router.delete("/variants/{variant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_variant(
    variant_id: str,
    store: CatalogStore = Depends(get_catalog_store),
) -> Response:
    await catalog.delete_variant(store, variant_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/orders", response_model=GroupedOrdersResponse)
async def list_orders_by_user(store: CatalogStore = Depends(get_catalog_store)) -> GroupedOrdersResponse:
    groups = await orders.list_orders_grouped_by_user(store)
    return GroupedOrdersResponse(
        users=[
            UserOrdersOut(
                user_id=group.user_id,
                name=group.user.name if group.user else None,
                email=group.user.email if group.user else None,
                orders=[OrderOut.from_order(o) for o in group.orders],
                count=len(group.orders),
            )
            for group in groups
        ],
        total_orders=sum(len(group.orders) for group in groups),
    )
