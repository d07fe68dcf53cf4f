from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from projersey.core.logging_config import logger

from .retry import RetryPolicy

# PaymentError kinds
NOT_CONFIGURED = "not_configured"
AUTHENTICATION = "authentication"
INVALID_REQUEST = "invalid_request"
NOT_FOUND = "not_found"
CONNECTION = "connection"
PROVIDER = "provider"

_STATUS_BY_KIND = {
    NOT_CONFIGURED: 503,
    AUTHENTICATION: 503,
    CONNECTION: 503,
    INVALID_REQUEST: 400,
    NOT_FOUND: 404,
    PROVIDER: 502,
}

_MESSAGE_BY_KIND = {
    NOT_CONFIGURED: "Payment service is not configured",
    AUTHENTICATION: "Payment service temporarily unavailable",
    CONNECTION: "Could not connect to payment service",
    INVALID_REQUEST: "Invalid payment request",
    NOT_FOUND: "Payment not found",
    PROVIDER: "Payment service returned an unexpected response",
}

# Terminal view of a payment intent
OUTCOME_SUCCEEDED = "succeeded"
OUTCOME_FAILED = "failed"
OUTCOME_PENDING = "pending"


class PaymentError(Exception):
    def __init__(self, kind: str, message: Optional[str] = None, detail: Optional[str] = None):
        self.kind = str(kind)
        self.message = message or _MESSAGE_BY_KIND.get(self.kind, "Payment failed")
        self.detail = detail
        super().__init__(f"{self.kind}: {self.message}")

    @property
    def status_code(self) -> int:
        return _STATUS_BY_KIND.get(self.kind, 500)


@dataclass(frozen=True)
class PaymentIntent:
    id: str
    client_secret: str
    amount: int
    currency: str


@dataclass(frozen=True)
class PaymentIntentStatus:
    id: str
    status: str  # provider status, e.g. requires_payment_method, processing, succeeded
    outcome: str  # succeeded | failed | pending
    amount: int
    currency: str
    failure_message: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.outcome != OUTCOME_PENDING


def payment_outcome(status: str, has_payment_error: bool = False) -> str:
    """
    Collapse a provider status into succeeded/failed/pending.

    A declined attempt sends the intent back to requires_payment_method with a
    last_payment_error; that counts as failed.
    """
    if status == "succeeded":
        return OUTCOME_SUCCEEDED
    if status == "canceled":
        return OUTCOME_FAILED
    if status == "requires_payment_method" and has_payment_error:
        return OUTCOME_FAILED
    return OUTCOME_PENDING


class PaymentGateway:
    """Creates payment intents for the hosted payment element and reports their outcome."""

    def create_payment_intent(
        self,
        amount_minor: int,
        currency: str,
        *,
        customer_id: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
        idempotency_key: Optional[str] = None,
    ) -> PaymentIntent:
        raise NotImplementedError

    def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntentStatus:
        raise NotImplementedError


class UnconfiguredGateway(PaymentGateway):
    def create_payment_intent(self, amount_minor, currency, **kwargs) -> PaymentIntent:
        raise PaymentError(NOT_CONFIGURED)

    def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntentStatus:
        raise PaymentError(NOT_CONFIGURED)


class StripeGateway(PaymentGateway):
    """
    Payment intents over the provider's REST API.

    Form-encoded requests with basic auth (secret key as user). Transport
    errors are resent per `retry`; creates carry an Idempotency-Key.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        api_base: str = "https://api.stripe.com",
        timeout: float = 30.0,
        retry: Optional[RetryPolicy] = None,
        client: Optional[httpx.Client] = None,
    ):
        if not secret_key:
            raise PaymentError(NOT_CONFIGURED)
        self.secret_key = secret_key
        self.api_base = api_base.rstrip("/")
        self.retry = retry or RetryPolicy()
        self.client = client or httpx.Client(timeout=timeout)

    def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        data: Optional[Dict[str, Any]] = None,
        idempotency_key: Optional[str] = None,
    ) -> Dict[str, Any]:
        headers: Dict[str, str] = {}
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key

        try:
            resp = self.retry.send(
                lambda: self.client.request(
                    method,
                    f"{self.api_base}{path}",
                    data=data,
                    headers=headers,
                    auth=(self.secret_key, ""),
                ),
                operation=operation,
                idempotency_key=idempotency_key,
            )
        except httpx.TransportError as e:
            logger.error("payment_request_connection_failed", operation=operation, error=repr(e))
            raise PaymentError(CONNECTION, detail=repr(e))

        if resp.status_code in (401, 403):
            raise PaymentError(AUTHENTICATION, detail=resp.text)
        if resp.status_code == 404 and method == "GET":
            raise PaymentError(NOT_FOUND, detail=resp.text)
        if resp.status_code in (400, 402, 404):
            raise PaymentError(INVALID_REQUEST, detail=resp.text)
        if resp.status_code >= 300:
            raise PaymentError(PROVIDER, detail=f"HTTP {resp.status_code}")

        try:
            body = resp.json()
        except ValueError:
            raise PaymentError(
                PROVIDER,
                detail=f"non-JSON body ({resp.headers.get('content-type', 'unknown')})",
            )
        if not isinstance(body, dict):
            raise PaymentError(PROVIDER, detail="unexpected body")
        return body

    def create_payment_intent(
        self,
        amount_minor: int,
        currency: str,
        *,
        customer_id: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
        idempotency_key: Optional[str] = None,
    ) -> PaymentIntent:
        data: Dict[str, Any] = {
            "amount": str(int(amount_minor)),
            "currency": currency.lower(),
            "automatic_payment_methods[enabled]": "true",
        }
        if customer_id:
            data["customer"] = customer_id
        for k, v in (metadata or {}).items():
            data[f"metadata[{k}]"] = str(v)

        body = self._request(
            "POST",
            "/v1/payment_intents",
            operation="create_payment_intent",
            data=data,
            idempotency_key=idempotency_key,
        )

        client_secret = body.get("client_secret")
        if not client_secret:
            raise PaymentError(PROVIDER, "No client secret returned from payment service")

        return PaymentIntent(
            id=str(body.get("id", "")),
            client_secret=str(client_secret),
            amount=int(body.get("amount", amount_minor)),
            currency=str(body.get("currency", currency)).lower(),
        )

    def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntentStatus:
        body = self._request(
            "GET",
            f"/v1/payment_intents/{payment_intent_id}",
            operation="retrieve_payment_intent",
        )

        status = body.get("status")
        if not status:
            raise PaymentError(PROVIDER, "No status returned from payment service")

        error = body.get("last_payment_error") or None
        failure_message = error.get("message") if isinstance(error, dict) else None

        return PaymentIntentStatus(
            id=str(body.get("id", payment_intent_id)),
            status=str(status),
            outcome=payment_outcome(str(status), has_payment_error=error is not None),
            amount=int(body.get("amount") or 0),
            currency=str(body.get("currency", "")).lower(),
            failure_message=failure_message,
        )
