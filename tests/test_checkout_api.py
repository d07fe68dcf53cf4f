import pytest

from conftest import FakeGateway, jersey_line, order
from projersey.dependencies import get_payment_gateway
from projersey.main import app

URL = "/api/checkout/create-payment-intent"


def test_charges_server_computed_total(client, gateway):
    body = {"order": order([jersey_line(qty=20, price=500, sku="jersey")]), "customerId": "cus_pro"}
    r = client.post(URL, json=body)

    assert r.status_code == 200
    data = r.json()
    assert data["success"] is True
    assert data["amount"] == 11877
    assert data["breakdown"]["grandTotal"] == 11877
    assert data["clientSecret"] == "pi_test_1_secret"
    assert data["transactionId"].startswith("txn_")

    (call,) = gateway.calls
    assert call["amount"] == 11877
    assert call["currency"] == "usd"
    assert call["customer_id"] == "cus_pro"
    assert call["idempotency_key"] == data["transactionId"]
    assert call["metadata"]["itemCount"] == "20"


def test_non_subscriber_pays_full_price(client, gateway):
    body = {"order": order([jersey_line(qty=20, price=500, sku="jersey")]), "customerId": "cus_other"}
    r = client.post(URL, json=body)

    assert r.status_code == 200
    assert r.json()["breakdown"]["subscriptionDiscountAmount"] == 0
    # 9000 + 3000 shipping + 840 tax
    assert gateway.calls[0]["amount"] == 12840


def test_client_subscriber_flag_is_not_accepted(client, gateway):
    body = {"order": {**order([jersey_line()]), "isSubscriber": True}}
    r = client.post(URL, json=body)

    assert r.status_code == 422
    assert gateway.calls == []


def test_matching_expected_total_is_charged(client, gateway):
    body = {"order": order([jersey_line(qty=2)]), "expectedGrandTotal": 7490}
    r = client.post(URL, json=body)

    assert r.status_code == 200
    assert gateway.calls[0]["amount"] == 7490


def test_stale_expected_total_is_409(client, gateway):
    body = {"order": order([jersey_line(qty=2)]), "expectedGrandTotal": 7000}
    r = client.post(URL, json=body)

    assert r.status_code == 409
    detail = r.json()["detail"]
    assert detail["code"] == "STALE_BREAKDOWN"
    assert detail["grandTotal"] == 7490
    assert gateway.calls == []


def test_invalid_order_is_422(client, gateway):
    r = client.post(URL, json={"order": order([jersey_line(price=-1)])})

    assert r.status_code == 422
    assert r.json()["detail"]["code"] == "NEGATIVE_PRICE"
    assert gateway.calls == []


def test_empty_order_is_below_minimum(client, gateway):
    r = client.post(URL, json={"order": order()})

    assert r.status_code == 400
    assert r.json()["detail"]["code"] == "AMOUNT_TOO_LOW"
    assert gateway.calls == []


@pytest.mark.parametrize(
    "kind,status",
    [
        ("not_configured", 503),
        ("authentication", 503),
        ("connection", 503),
        ("invalid_request", 400),
        ("provider", 502),
    ],
)
def test_gateway_errors_are_mapped(client, kind, status):
    failing = FakeGateway(fail_with=kind)
    app.dependency_overrides[get_payment_gateway] = lambda: failing

    r = client.post(URL, json={"order": order([jersey_line()])})

    assert r.status_code == status
    assert r.json()["detail"]["code"] == kind.upper()
    assert len(failing.calls) == 1


@pytest.mark.parametrize(
    "status,outcome,paid",
    [
        ("succeeded", "succeeded", True),
        ("canceled", "failed", False),
        ("processing", "pending", False),
    ],
)
def test_payment_status(client, gateway, status, outcome, paid):
    gateway.statuses["pi_test_1"] = status
    r = client.get("/api/checkout/status/pi_test_1")

    assert r.status_code == 200
    data = r.json()
    assert data["paymentIntentId"] == "pi_test_1"
    assert data["status"] == status
    assert data["outcome"] == outcome
    assert data["paid"] is paid
    assert data["amount"] == 7490


def test_payment_status_unknown_intent_is_404(client):
    r = client.get("/api/checkout/status/pi_nope")

    assert r.status_code == 404
    assert r.json()["detail"]["code"] == "NOT_FOUND"


def test_payment_status_rejects_malformed_id(client, gateway):
    r = client.get("/api/checkout/status/txn_123")

    assert r.status_code == 400
    assert r.json()["detail"]["code"] == "INVALID_PAYMENT_INTENT_ID"


def test_payment_status_counts_outcomes(client, gateway):
    gateway.statuses["pi_test_9"] = "succeeded"
    client.get("/api/checkout/status/pi_test_9")

    assert 'projersey_payment_outcome_total{outcome="succeeded"}' in client.get("/metrics").text


def test_payment_status_when_unconfigured(client):
    app.dependency_overrides[get_payment_gateway] = lambda: FakeGateway(fail_with="not_configured")

    r = client.get("/api/checkout/status/pi_test_1")

    assert r.status_code == 503
    assert r.json()["detail"]["code"] == "NOT_CONFIGURED"
