"""User endpoints.

POST   /v1/users              - Register
GET    /v1/users/{id}         - Get profile
PUT    /v1/users/{id}         - Update name/email/phone/address
DELETE /v1/users/{id}         - Delete user and their orders
GET    /v1/users/{id}/orders  - The user's orders
"""

from fastapi import APIRouter, Depends, Response, status

from app.schemas import OrderListResponse, OrderOut, UserCreate, UserOut, UserUpdate
from app.services import users
from app.stores.catalog import CatalogStore, get_catalog_store

router = APIRouter()


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: UserCreate,
    store: CatalogStore = Depends(get_catalog_store),
) -> UserOut:
    user = await users.create_user(
        store,
        name=request.name,
        email=request.email,
        phone=request.phone,
        address=request.address.model_dump(by_alias=True, exclude_none=True) if request.address else None,
    )
    return UserOut.from_user(user)


@router.get("/{user_id}", response_model=UserOut)
async def get_user(
    user_id: str,
    store: CatalogStore = Depends(get_catalog_store),
) -> UserOut:
    return UserOut.from_user(await users.get_user(store, user_id))


@router.put("/{user_id}", response_model=UserOut)
async def update_user(
    user_id: str,
    request: UserUpdate,
    store: CatalogStore = Depends(get_catalog_store),
) -> UserOut:
    """Update profile fields. Any other key is rejected with INVALID_UPDATE."""
    changes = {**request.model_dump(exclude_unset=True, by_alias=True), **(request.model_extra or {})}
    if isinstance(changes.get("address"), dict):
        changes["address"] = {k: v for k, v in changes["address"].items() if v is not None}
    user = await users.update_user(store, user_id, changes)
    return UserOut.from_user(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    store: CatalogStore = Depends(get_catalog_store),
) -> Response:
    await users.delete_user(store, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}/orders", response_model=OrderListResponse)
async def list_user_orders(
    user_id: str,
    store: CatalogStore = Depends(get_catalog_store),
) -> OrderListResponse:
    user_orders = await users.list_user_orders(store, user_id)
    return OrderListResponse(orders=[OrderOut.from_order(o) for o in user_orders], count=len(user_orders))
