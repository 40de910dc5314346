import warnings

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from api.dependencies import get_order_service
from application.services.order_service import OrderApplicationService
from core.exceptions import _business_code_to_http_status
from main import app
from shared.codes import BusinessCode


pytestmark = pytest.mark.asyncio

USER_HEADERS = {"X-User-ID": "1"}


@pytest_asyncio.fixture
async def client(uow_factory):
    app.dependency_overrides[get_order_service] = lambda: OrderApplicationService(uow_factory)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _seed_discounted_cart(store):
    product = await store.product(price="500.00", stock=5)
    await store.cart_item(1, product, quantity=2)
    await store.wallet(1, "100")
    await store.coupon(code="SAVE20", discount_value="20", min_purchase="500", max_discount="200")
    return product


async def test_calculate_preview(client, store):
    await _seed_discounted_cart(store)

    resp = await client.post(
        "/api/v1/orders/calculate",
        json={"coupon_code": "SAVE20", "use_wallet_points": True, "wallet_points_to_use": "50"},
        headers=USER_HEADERS,
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["code"] == BusinessCode.SUCCESS
    data = body["data"]
    assert data["subtotal"] == "1000.00"
    assert data["coupon_discount"] == "200.00"
    assert data["wallet_points_used"] == "50.00"
    assert data["final_amount"] == "750.00"
    assert data["items"][0]["quantity"] == 2
    assert "X-Request-ID" in resp.headers


async def test_order_lifecycle(client, store):
    await _seed_discounted_cart(store)

    created = await client.post(
        "/api/v1/orders",
        json={"coupon_code": "SAVE20", "use_wallet_points": True, "wallet_points_to_use": 50},
        headers=USER_HEADERS,
    )
    assert created.status_code == 201
    order = created.json()["data"]
    assert order["final_amount"] == "750.00"
    assert order["payment_status"] == "PENDING"
    assert order["order_status"] == "PENDING"
    assert order["coupon_code"] == "SAVE20"

    listed = await client.get("/api/v1/orders", params={"page": 1, "size": 10}, headers=USER_HEADERS)
    assert listed.status_code == 200
    page = listed.json()["data"]
    assert page["total"] == 1
    assert page["items"][0]["id"] == order["id"]

    fetched = await client.get(f"/api/v1/orders/{order['id']}", headers=USER_HEADERS)
    assert fetched.status_code == 200
    assert fetched.json()["data"]["items"][0]["unit_price"] == "500.00"

    paid = await client.patch(
        f"/api/v1/orders/{order['id']}/payment-status",
        json={"payment_status": "SUCCESS", "payment_method": "card", "transaction_id": "tx-42"},
        headers=USER_HEADERS,
    )
    assert paid.status_code == 200
    assert paid.json()["data"]["order_status"] == "CONFIRMED"
    assert paid.json()["data"]["transaction"]["transaction_id"] == "tx-42"

    again = await client.patch(
        f"/api/v1/orders/{order['id']}/payment-status",
        json={"payment_status": "SUCCESS"},
        headers=USER_HEADERS,
    )
    assert again.status_code == 409
    assert again.json()["code"] == BusinessCode.ALREADY_SETTLED
    assert again.json()["error"]["type"] == "AlreadySettled"

    confirmed = await client.get("/api/v1/orders", params={"status": "CONFIRMED"}, headers=USER_HEADERS)
    assert confirmed.json()["data"]["total"] == 1
    cancelled = await client.get("/api/v1/orders", params={"status": "CANCELLED"}, headers=USER_HEADERS)
    assert cancelled.json()["data"]["total"] == 0


async def test_missing_user_header(client):
    resp = await client.post("/api/v1/orders/calculate", json={})
    assert resp.status_code == 401
    assert resp.json()["code"] == BusinessCode.UNAUTHORIZED


async def test_empty_cart_is_bad_request(client):
    resp = await client.post("/api/v1/orders", json={}, headers=USER_HEADERS)
    assert resp.status_code == 400
    assert resp.json()["code"] == BusinessCode.EMPTY_CART


async def test_unknown_coupon(client, store):
    product = await store.product()
    await store.cart_item(1, product)
    resp = await client.post(
        "/api/v1/orders/calculate", json={"coupon_code": "NOPE"}, headers=USER_HEADERS
    )
    assert resp.status_code == 404
    assert resp.json()["code"] == BusinessCode.COUPON_NOT_FOUND
    assert resp.json()["error"]["field"] == "coupon_code"


async def test_insufficient_stock_is_conflict(client, store):
    product = await store.product(stock=1)
    await store.cart_item(1, product, quantity=2)
    resp = await client.post("/api/v1/orders", json={}, headers=USER_HEADERS)
    assert resp.status_code == 409
    assert resp.json()["code"] == BusinessCode.INSUFFICIENT_STOCK
    assert resp.json()["error"]["details"]["available"] == 1


async def test_order_of_another_user_is_not_found(client, store):
    product = await store.product()
    await store.cart_item(1, product)
    created = await client.post("/api/v1/orders", json={}, headers=USER_HEADERS)
    order_id = created.json()["data"]["id"]

    resp = await client.get(f"/api/v1/orders/{order_id}", headers={"X-User-ID": "2"})
    assert resp.status_code == 404
    assert resp.json()["code"] == BusinessCode.ORDER_NOT_FOUND


async def test_invalid_payment_status(client):
    resp = await client.patch(
        "/api/v1/orders/some-id/payment-status",
        json={"payment_status": "REFUNDED"},
        headers=USER_HEADERS,
    )
    assert resp.status_code == 422
    assert resp.json()["code"] == BusinessCode.PARAM_VALIDATION_ERROR


async def test_negative_wallet_points_rejected(client):
    resp = await client.post(
        "/api/v1/orders/calculate",
        json={"use_wallet_points": True, "wallet_points_to_use": "-5"},
        headers=USER_HEADERS,
    )
    assert resp.status_code == 422


async def test_validation_status_lookup_emits_no_deprecation_warning():
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        status_code = _business_code_to_http_status(BusinessCode.PARAM_VALIDATION_ERROR)

    assert status_code == 422
    assert not [w for w in caught if issubclass(w.category, DeprecationWarning)]
