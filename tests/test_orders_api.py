from datetime import timedelta
from unittest import mock

import pytest

from grocery_service.models import Order, utcnow
from grocery_service.routers.orders import generate_order_id

CHECKOUT = {
    "customerName": "Karim",
    "phone": "01711111111",
    "address": "Mirpur, Dhaka",
    "items": [
        {"productId": "1", "quantity": 2, "name": "Rice", "price": 60.0, "image": "/rice.jpg"},
        {"productId": "2", "quantity": 1, "name": "Milk", "price": 80.0},
    ],
    "subtotal": 200.0,
    "tax": 10.0,
    "shipping": 50.0,
    "total": 260.0,
}


def test_generated_order_id_format():
    order_id = generate_order_id()
    prefix, millis, suffix = order_id.split("-")
    assert prefix == "ORD"
    assert millis.isdigit()
    assert len(suffix) == 9 and suffix.isalnum() and suffix.upper() == suffix


def test_checkout_creates_pending_order(client):
    response = client.post("/api/admin/orders", json=CHECKOUT)
    assert response.status_code == 201
    order = response.json()
    assert order["orderId"].startswith("ORD-")
    assert order["status"] == "pending"
    assert [i["productId"] for i in order["items"]] == ["1", "2"]
    assert order["items"][1]["image"] == ""
    assert order["orderDate"] is not None


def test_checkout_requires_items(client):
    response = client.post("/api/admin/orders", json={**CHECKOUT, "items": []})
    assert response.status_code == 400


def test_duplicate_order_id_rejected(client):
    client.post("/api/admin/orders", json={**CHECKOUT, "orderId": "ORD-X"})
    response = client.post("/api/admin/orders", json={**CHECKOUT, "orderId": "ORD-X"})
    assert response.status_code == 400


def test_total_is_caller_trusted(client):
    # total == subtotal + tax + shipping is not enforced; a mismatched total is stored as sent.
    response = client.post("/api/admin/orders", json={**CHECKOUT, "total": 999.0})
    order = response.json()
    assert order["total"] == 999.0
    assert order["subtotal"] + order["tax"] + order["shipping"] != order["total"]


def test_list_newest_first(client, make_order):
    make_order("ORD-A")
    make_order("ORD-B")
    ids = [o["orderId"] for o in client.get("/api/admin/orders").json()]
    assert ids == ["ORD-B", "ORD-A"]


def test_get_order_by_business_or_row_id(client, make_order):
    order = make_order("ORD-42")
    assert client.get("/api/admin/orders/ORD-42").json()["id"] == str(order.id)
    assert client.get(f"/api/admin/orders/{order.id}").json()["orderId"] == "ORD-42"
    assert client.get("/api/admin/orders/ORD-missing").status_code == 404


def test_patch_order_status(client, make_order):
    make_order("ORD-1")
    response = client.patch("/api/admin/orders/ORD-1", json={"status": "shipped"})
    assert response.status_code == 200
    assert response.json()["status"] == "shipped"
    assert response.json()["customerName"] == "Rahim"


def test_pending_count_and_notifications(client, make_order):
    make_order("ORD-1")
    make_order("ORD-2", status="delivered")
    make_order("ORD-3")

    assert client.get("/api/admin/orders/pending-count").json() == {"success": True, "count": 2}

    body = client.get("/api/admin/orders/notifications", params={"limit": 1}).json()
    assert body["count"] == 1
    assert body["notifications"][0]["orderId"] == "ORD-3"


def test_notifications_since(client, make_order):
    make_order("ORD-1")
    since = (utcnow() + timedelta(minutes=5)).isoformat() + "Z"
    body = client.get("/api/admin/orders/notifications", params={"since": since}).json()
    assert body["count"] == 0


def test_analytics_endpoint(client, make_order):
    now = utcnow()
    make_order("ORD-1", total=100, items=[("1", 2, "Rice", 50.0)])
    make_order("ORD-2", total=300, status="delivered", items=[("2", 3, "Milk", 100.0)])
    make_order("ORD-old", total=1000, order_date=now - timedelta(days=60))

    response = client.get("/api/admin/orders/analytics", params={"days": 7, "top": 1})
    assert response.status_code == 200
    body = response.json()
    assert len(body["dailyOrders"]) == 7
    assert body["summary"] == {"totalOrders": 2, "totalRevenue": 400, "avgOrderValue": 200}
    assert body["statusCounts"] == {"pending": 1, "delivered": 1}
    assert body["topProducts"] == [
        {"productId": "2", "name": "Milk", "quantity": 3, "revenue": 300.0}
    ]


def test_checkout_stores_order_date_in_utc(client):
    today = utcnow().date()
    yesterday = today - timedelta(days=1)
    # 02:00 in Dhaka is 20:00 UTC on the previous day.
    order_date = f"{today.isoformat()}T02:00:00+06:00"

    order = client.post("/api/admin/orders", json={**CHECKOUT, "total": 10.0, "orderDate": order_date}).json()
    assert order["orderDate"] == f"{yesterday.isoformat()}T20:00:00"

    daily = client.get("/api/admin/orders/analytics", params={"days": 2}).json()["dailyOrders"]
    assert daily == [
        {"date": yesterday.isoformat(), "orders": 1, "revenue": 10.0},
        {"date": today.isoformat(), "orders": 0, "revenue": 0},
    ]


def test_analytics_rejects_zero_days(client):
    assert client.get("/api/admin/orders/analytics", params={"days": 0}).status_code == 400


def test_analytics_rejects_oversized_days(client):
    response = client.get("/api/admin/orders/analytics", params={"days": 100000000})
    assert response.status_code == 400


@pytest.mark.parametrize(
    "method,path,body",
    [
        ("post", "/api/admin/orders/steadfast/send", {"orderId": "ORD-1"}),
        ("post", "/api/admin/orders/steadfast/status", {"orderId": "ORD-1"}),
        ("get", "/api/admin/orders/steadfast/balance", None),
    ],
)
def test_steadfast_routes_gated(client, make_order, method, path, body):
    make_order("ORD-1")
    response = getattr(client, method)(path, **({"json": body} if body else {}))
    assert response.status_code == 403
    assert "Steadfast Courier" in response.json()["detail"]


def test_send_to_steadfast(client, db, make_order, enable_module, credentials, fake_response):
    enable_module("steadfast-courier")
    make_order("ORD-1", total=260.0)
    consignment = {"consignment_id": 1424107, "tracking_code": "15BAEB8A", "status": "in_review"}

    with mock.patch(
        "grocery_service.integrations.steadfast.requests.request",
        return_value=fake_response({"status": 200, "consignment": consignment}),
    ) as request:
        response = client.post(
            "/api/admin/orders/steadfast/send", json={"orderId": "ORD-1", "deliveryType": 1}
        )

    assert response.status_code == 200
    assert response.json()["consignment"] == {
        "consignmentId": 1424107,
        "trackingCode": "15BAEB8A",
        "status": "in_review",
    }
    method, url = request.call_args.args
    assert method == "POST" and url.endswith("/create_order")
    payload = request.call_args.kwargs["json"]
    assert payload["invoice"] == "ORD-1"
    assert payload["cod_amount"] == 260.0
    assert payload["delivery_type"] == 1
    assert request.call_args.kwargs["headers"]["Api-Key"] == "sf-key"

    db.expire_all()
    stored = db.query(Order).filter(Order.order_id == "ORD-1").one()
    assert stored.steadfast_tracking_code == "15BAEB8A"
    assert stored.steadfast_sent_at is not None

    again = client.post("/api/admin/orders/steadfast/send", json={"orderId": "ORD-1"})
    assert again.status_code == 400


def test_steadfast_failure_is_500(client, make_order, enable_module, credentials, fake_response):
    enable_module("steadfast-courier")
    make_order("ORD-1")
    with mock.patch(
        "grocery_service.integrations.steadfast.requests.request",
        return_value=fake_response({"message": "Invalid phone"}, status_code=422),
    ):
        response = client.post("/api/admin/orders/steadfast/send", json={"orderId": "ORD-1"})
    assert response.status_code == 500
    assert response.json()["detail"] == "Invalid phone"


def test_steadfast_without_credentials_is_500(client, make_order, enable_module):
    enable_module("steadfast-courier")
    make_order("ORD-1")
    with mock.patch("grocery_service.integrations.steadfast.requests.request") as request:
        response = client.post("/api/admin/orders/steadfast/send", json={"orderId": "ORD-1"})
    assert response.status_code == 500
    request.assert_not_called()


def test_steadfast_status_prefers_consignment_id(client, make_order, enable_module, credentials, fake_response):
    enable_module("steadfast-courier")
    make_order("ORD-1", steadfast_consignment_id=77, steadfast_tracking_code="TC")
    with mock.patch(
        "grocery_service.integrations.steadfast.requests.request",
        return_value=fake_response({"status": 200, "delivery_status": "delivered"}),
    ) as request:
        response = client.post("/api/admin/orders/steadfast/status", json={"orderId": "ORD-1"})
    assert response.json()["deliveryStatus"] == "delivered"
    assert request.call_args.args[1].endswith("/status_by_cid/77")


def test_steadfast_status_requires_sent_order(client, make_order, enable_module, credentials):
    enable_module("steadfast-courier")
    make_order("ORD-1")
    response = client.post("/api/admin/orders/steadfast/status", json={"orderId": "ORD-1"})
    assert response.status_code == 400


def test_steadfast_balance(client, enable_module, credentials, fake_response):
    enable_module("steadfast-courier")
    with mock.patch(
        "grocery_service.integrations.steadfast.requests.request",
        return_value=fake_response({"status": 200, "current_balance": 1500}),
    ):
        response = client.get("/api/admin/orders/steadfast/balance")
    assert response.json() == {"success": True, "currentBalance": 1500}


def test_order_fraud_check_gated(client, make_order):
    make_order("ORD-1")
    response = client.post("/api/admin/orders/fraud-check", json={"orderId": "ORD-1"})
    assert response.status_code == 403


def test_order_fraud_check_stores_result(client, db, make_order, enable_module, credentials, fake_response):
    enable_module("fraud-check")
    make_order("ORD-1")
    api = {
        "status": "success",
        "courierData": {
            "pathao": {"total_parcel": 4, "success_parcel": 2},
            "summary": {"total_parcel": 10, "success_parcel": 6, "cancelled_parcel": 4, "success_ratio": 60},
        },
    }
    with mock.patch(
        "grocery_service.integrations.fraud_check.requests.post",
        return_value=fake_response(api),
    ):
        response = client.post("/api/admin/orders/fraud-check", json={"orderId": "ORD-1"})

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["riskLevel"] == "medium"
    assert result["successRatio"] == 60
    assert result["phone"] == "01700000000"
    assert "summary" not in result["courierData"]

    db.expire_all()
    stored = db.query(Order).filter(Order.order_id == "ORD-1").one()
    assert stored.fraud_checked is True
    assert stored.fraud_check_result["riskLevel"] == "medium"
