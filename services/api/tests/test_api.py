"""HTTP surface: variants, admin, orders and users."""

import pytest
from httpx import AsyncClient

from tests.conftest import FakeCatalogStore, make_laptop, make_tablet, make_variant

PHONE_DOC = {
    "device_type": "Phone",
    "model": "iPhone 13",
    "condition": "New",
    "storage": 256,
    "color": "Black",
    "battery": "100%",
    "price": 699,
}


async def _user(client: AsyncClient, email: str = "ada@example.com") -> dict:
    response = await client.post("/v1/users", json={"name": "Ada", "email": email})
    assert response.status_code == 201
    return response.json()


# ============================================================
# Variants
# ============================================================


@pytest.mark.asyncio
async def test_list_variants_filters_and_paginates(client: AsyncClient, store: FakeCatalogStore):
    store.seed(
        make_variant(storage=128, price=500),
        make_variant(storage=256, price=600),
        make_variant(storage=512, price=800),
        make_laptop(price=999),
    )

    response = await client.get(
        "/v1/variants",
        params={"deviceType": "phone", "storage": ["256", "512"], "maxPrice": 700, "limit": 5},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["count"] == 1
    assert data["pages"] == 1
    assert data["limit"] == 5
    item = data["items"][0]
    assert item["storage"] == 256
    assert item["deviceType"] == "Phone"
    assert "skuKey" in item


@pytest.mark.asyncio
async def test_list_variants_limit_is_capped(client: AsyncClient, store: FakeCatalogStore):
    response = await client.get("/v1/variants", params={"limit": 5000})
    assert response.status_code == 200
    assert response.json()["limit"] == 100


@pytest.mark.asyncio
async def test_options_endpoint(client: AsyncClient, store: FakeCatalogStore):
    store.seed(
        make_laptop(model="X1", cpu="M1", ram=8, price=900),
        make_laptop(model="X1", cpu="M2", ram=16, price=1200),
    )

    response = await client.get("/v1/variants/options", params={"model": "X1", "deviceType": "Laptop"})
    assert response.status_code == 200
    data = response.json()
    assert data["options"]["cpu"] == ["M1", "M2"]
    assert data["options"]["ram"] == [8, 16]
    assert data["price"] == {"min": 900, "max": 1200}
    assert data["variantCount"] == 2


@pytest.mark.asyncio
async def test_options_for_unknown_model_are_empty(client: AsyncClient):
    response = await client.get("/v1/variants/options", params={"model": "Nope", "deviceType": "Tablet"})
    assert response.status_code == 200
    data = response.json()
    assert data["variantCount"] == 0
    assert data["price"] == {"min": None, "max": None}


@pytest.mark.asyncio
async def test_unknown_device_type_is_invalid_field(client: AsyncClient):
    response = await client.get("/v1/variants/combinations", params={"model": "X", "deviceType": "Watch"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_FIELD"


@pytest.mark.asyncio
async def test_combinations_and_check(client: AsyncClient, store: FakeCatalogStore):
    store.seed(make_variant(storage=256, color="Black"), make_variant(storage=256, color="White"))

    response = await client.get("/v1/variants/combinations", params={"model": "iPhone 13", "deviceType": "Phone"})
    assert response.status_code == 200
    assert response.json()["count"] == 2

    ok = await client.post(
        "/v1/variants/combinations/check",
        json={"model": "iPhone 13", "deviceType": "Phone", "selection": {"storage": "256", "color": "White"}},
    )
    assert ok.status_code == 200
    assert ok.json()["count"] == 1

    bad = await client.post(
        "/v1/variants/combinations/check",
        json={"model": "iPhone 13", "deviceType": "Phone", "selection": {"color": "Gold"}},
    )
    assert bad.status_code == 400
    error = bad.json()["error"]
    assert error["code"] == "INVALID_CONFIGURATION"
    assert error["detail"]["field"] == "color"


@pytest.mark.asyncio
async def test_lowest_price_buckets(client: AsyncClient, store: FakeCatalogStore):
    store.seed(
        make_variant(model="A", price=500),
        make_variant(model="A", price=300),
        make_variant(model="B", price=700),
        make_tablet(price=450),
    )

    response = await client.get("/v1/variants/lowest-price")
    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 3
    assert {v["model"]: v["price"] for v in data["byDeviceType"]["Phones"]} == {"A": 300, "B": 700}
    assert data["byDeviceType"]["Laptops"] == []


@pytest.mark.asyncio
async def test_variant_detail_includes_option_set(client: AsyncClient, store: FakeCatalogStore):
    (variant, _) = store.seed(make_variant(storage=128), make_variant(storage=256))

    response = await client.get(f"/v1/variants/{variant.variant_id}")
    assert response.status_code == 200
    data = response.json()
    assert data["variant"]["id"] == variant.variant_id
    assert data["options"]["options"]["storage"] == [128, 256]


# ============================================================
# Admin
# ============================================================


@pytest.mark.asyncio
async def test_bulk_insert_full_success_is_201(client: AsyncClient, store: FakeCatalogStore):
    response = await client.post("/v1/admin/variants/bulk", json={"Phones": [PHONE_DOC, {**PHONE_DOC, "color": "Red"}]})
    assert response.status_code == 201
    data = response.json()
    assert data["insertedCount"] == 2
    assert data["failedCount"] == 0
    assert len(store.variants) == 2


@pytest.mark.asyncio
async def test_bulk_insert_partial_failure_is_207(client: AsyncClient, store: FakeCatalogStore):
    await client.post("/v1/admin/variants/bulk", json={"Phones": [{**PHONE_DOC, "variant_id": "dup"}]})

    response = await client.post(
        "/v1/admin/variants/bulk",
        json={"Phones": [{**PHONE_DOC, "variant_id": "dup"}, {**PHONE_DOC, "variant_id": "new"}]},
    )
    assert response.status_code == 207
    data = response.json()
    assert data["insertedCount"] == 1
    assert data["failedCount"] == 1
    assert data["errors"][0]["variantId"] == "dup"


@pytest.mark.asyncio
async def test_bulk_insert_invalid_document_is_400(client: AsyncClient, store: FakeCatalogStore):
    laptop = {**PHONE_DOC, "device_type": "Laptop", "cpu": "M2"}
    response = await client.post("/v1/admin/variants/bulk", json={"Laptops": [laptop]})
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "MISSING_REQUIRED_FIELD"
    assert error["detail"]["field"] == "ram"
    assert error["detail"]["index"] == 0
    assert store.variants == []


@pytest.mark.asyncio
async def test_admin_variant_crud(client: AsyncClient, store: FakeCatalogStore):
    created = await client.post("/v1/admin/variants", json=PHONE_DOC)
    assert created.status_code == 201
    variant_id = created.json()["id"]

    patched = await client.patch(f"/v1/admin/variants/{variant_id}", json={"price": 649})
    assert patched.status_code == 200
    assert patched.json()["price"] == 649

    deleted = await client.delete(f"/v1/admin/variants/{variant_id}")
    assert deleted.status_code == 204
    assert store.variants == []


# ============================================================
# Orders and users
# ============================================================


@pytest.mark.asyncio
async def test_order_flow(client: AsyncClient, store: FakeCatalogStore):
    (variant,) = store.seed(make_variant(storage=256, color="Black", price=699))
    user = await _user(client)

    created = await client.post(
        "/v1/orders",
        json={
            "userId": user["id"],
            "items": [
                {
                    "productId": variant.variant_id,
                    "configuration": {"condition": "New", "storage": "256", "color": "Black"},
                    "quantity": 2,
                    "price": 699,
                }
            ],
            "shippingAddress": {"street": "1 Main St", "city": "London", "zipCode": "N1"},
        },
    )
    assert created.status_code == 201
    order = created.json()
    assert order["status"] == "pending"
    assert order["totalAmount"] == 1398
    assert order["items"][0]["configuration"]["storage"] == 256
    assert order["shippingAddress"]["zipCode"] == "N1"

    profile = (await client.get(f"/v1/users/{user['id']}")).json()
    assert profile["currentOrderId"] == order["id"]

    delivered = await client.put(f"/v1/orders/{order['id']}", json={"status": "delivered"})
    assert delivered.status_code == 200

    again = await client.put(f"/v1/orders/{order['id']}", json={"status": "processing"})
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"

    profile = (await client.get(f"/v1/users/{user['id']}")).json()
    assert profile["purchaseHistory"] == [order["id"]]
    assert profile["currentOrderId"] is None

    listed = (await client.get(f"/v1/orders/user/{user['id']}")).json()
    assert listed["count"] == 1

    grouped = (await client.get("/v1/admin/orders")).json()
    assert grouped["totalOrders"] == 1
    assert grouped["users"][0]["email"] == "ada@example.com"


@pytest.mark.asyncio
async def test_order_with_mismatched_configuration_is_rejected(client: AsyncClient, store: FakeCatalogStore):
    (variant,) = store.seed(make_variant(storage=256, color="Black"))
    user = await _user(client)

    response = await client.post(
        "/v1/orders",
        json={
            "userId": user["id"],
            "items": [
                {
                    "productId": variant.variant_id,
                    "configuration": {"condition": "New", "storage": "128", "color": "Black"},
                    "price": 500,
                }
            ],
        },
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_CONFIGURATION"
    assert store.orders == []


@pytest.mark.asyncio
@pytest.mark.parametrize("price", ["inf", "nan", -1])
async def test_order_with_invalid_price_is_rejected(client: AsyncClient, store: FakeCatalogStore, price):
    (variant,) = store.seed(make_variant(storage=256, color="Black"))
    user = await _user(client)

    response = await client.post(
        "/v1/orders",
        json={
            "userId": user["id"],
            "items": [
                {
                    "productId": variant.variant_id,
                    "configuration": {"condition": "New", "storage": 256, "color": "Black"},
                    "price": price,
                }
            ],
        },
    )
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["detail"]["errors"][0]["field"] == "items.0.price"
    assert store.orders == []
    assert (await client.get(f"/v1/users/{user['id']}")).json()["currentOrderId"] is None


@pytest.mark.asyncio
async def test_user_update_rules(client: AsyncClient):
    user = await _user(client)
    await _user(client, email="grace@example.com")

    ok = await client.put(f"/v1/users/{user['id']}", json={"name": "Ada Lovelace"})
    assert ok.status_code == 200
    assert ok.json()["name"] == "Ada Lovelace"

    invalid = await client.put(f"/v1/users/{user['id']}", json={"purchaseHistory": ["x"]})
    assert invalid.status_code == 400
    assert invalid.json()["error"]["code"] == "INVALID_UPDATE"

    conflict = await client.put(f"/v1/users/{user['id']}", json={"email": "grace@example.com"})
    assert conflict.status_code == 409
    assert conflict.json()["error"]["code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_duplicate_email_is_conflict(client: AsyncClient):
    await _user(client)
    response = await client.post("/v1/users", json={"name": "Ada 2", "email": "ada@example.com"})
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_delete_user_and_order(client: AsyncClient, store: FakeCatalogStore):
    user = await _user(client)

    assert (await client.delete(f"/v1/users/{user['id']}")).status_code == 204
    assert (await client.get(f"/v1/users/{user['id']}")).status_code == 404
    assert (await client.delete("/v1/orders/missing")).status_code == 404
