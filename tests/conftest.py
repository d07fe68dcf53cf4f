from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from projersey.core.rate_limit import limiter
from projersey.dependencies import get_payment_gateway, get_subscription_directory
from projersey.main import app
from projersey.payments.gateway import (
    PaymentError,
    PaymentGateway,
    PaymentIntent,
    PaymentIntentStatus,
    payment_outcome,
)
from projersey.subscriptions.service import SubscriptionDirectory


class FakeGateway(PaymentGateway):
    """Records calls; optionally fails with a PaymentError."""

    def __init__(self, fail_with: Optional[str] = None):
        self.fail_with = fail_with
        self.calls: List[Dict] = []
        self.statuses: Dict[str, str] = {}

    def create_payment_intent(self, amount_minor, currency, **kwargs) -> PaymentIntent:
        self.calls.append({"amount": amount_minor, "currency": currency, **kwargs})
        if self.fail_with:
            raise PaymentError(self.fail_with)
        return PaymentIntent(
            id=f"pi_test_{len(self.calls)}",
            client_secret=f"pi_test_{len(self.calls)}_secret",
            amount=amount_minor,
            currency=currency,
        )

    def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntentStatus:
        if self.fail_with:
            raise PaymentError(self.fail_with)
        if payment_intent_id not in self.statuses:
            raise PaymentError("not_found")
        status = self.statuses[payment_intent_id]
        return PaymentIntentStatus(
            id=payment_intent_id,
            status=status,
            outcome=payment_outcome(status),
            amount=7490,
            currency="usd",
        )


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def directory():
    return SubscriptionDirectory.from_ids(["cus_pro"])


@pytest.fixture
def client(gateway, directory):
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_subscription_directory] = lambda: directory
    limiter.reset()
    yield TestClient(app)
    app.dependency_overrides.clear()


def jersey_line(qty: int = 1, price: int = 2000, sku: str = "soccer_jersey") -> Dict:
    return {
        "skuOrType": sku,
        "unitPriceMinor": price,
        "quantity": qty,
        "size": "M",
        "gender": "mens",
    }


def order(lines=None, add_ons=None, is_team_order=False, roster=None) -> Dict:
    body = {
        "lineItems": lines or [],
        "addOns": add_ons or [],
        "isTeamOrder": is_team_order,
    }
    if roster is not None:
        body["roster"] = roster
    return body
