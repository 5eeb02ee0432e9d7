"""Order endpoints.

POST   /v1/orders                 - Place an order
GET    /v1/orders/{id}            - Get an order
GET    /v1/orders/user/{userId}   - Orders of a user, newest first
PUT    /v1/orders/{id}            - Change status
DELETE /v1/orders/{id}            - Delete an order
"""

from fastapi import APIRouter, Depends, Response, status

from app.schemas import OrderCreate, OrderListResponse, OrderOut, OrderStatusUpdate
from app.services import orders
from app.services.order_validation import OrderLineRequest
from app.stores.catalog import CatalogStore, get_catalog_store

router = APIRouter()


@router.post("", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
async def create_order(
    request: OrderCreate,
    store: CatalogStore = Depends(get_catalog_store),
) -> OrderOut:
    """Validate every line against its variant, then persist the order."""
    lines = [
        OrderLineRequest(
            variant_id=item.product_id,
            configuration=item.configuration,
            quantity=item.quantity,
            price=item.price,
        )
        for item in request.items
    ]
    shipping = request.shipping_address.model_dump(by_alias=True, exclude_none=True) if request.shipping_address else None
    order = await orders.create_order(store, request.user_id, lines, shipping)
    return OrderOut.from_order(order)


@router.get("/user/{user_id}", response_model=OrderListResponse)
async def list_user_orders(
    user_id: str,
    store: CatalogStore = Depends(get_catalog_store),
) -> OrderListResponse:
    user_orders = await orders.list_orders_for_user(store, user_id)
    return OrderListResponse(orders=[OrderOut.from_order(o) for o in user_orders], count=len(user_orders))


@router.get("/{order_id}", response_model=OrderOut)
async def get_order(
    order_id: str,
    store: CatalogStore = Depends(get_catalog_store),
) -> OrderOut:
    return OrderOut.from_order(await orders.get_order(store, order_id))


@router.put("/{order_id}", response_model=OrderOut)
async def update_order_status(
    order_id: str,
    request: OrderStatusUpdate,
    store: CatalogStore = Depends(get_catalog_store),
) -> OrderOut:
    """Change an order's status. delivered and cancelled are final."""
    order = await orders.update_order_status(store, order_id, request.status)
    return OrderOut.from_order(order)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: str,
    store: CatalogStore = Depends(get_catalog_store),
) -> Response:
    await orders.delete_order(store, order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
