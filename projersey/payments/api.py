from __future__ import annotations

import re
import time
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException

from projersey.config import get_settings
from projersey.core.logging_config import logger
from projersey.dependencies import (
    get_payment_gateway,
    get_price_engine,
    get_subscription_directory,
)
from projersey.observability.metrics import (
    grand_total_hist,
    payment_intent_counter,
    payment_outcome_counter,
)
from projersey.pricing.api.price import invalid_input_exception
from projersey.pricing.engine.price_engine import PriceEngine
from projersey.pricing.errors import InvalidInput
from projersey.pricing.explain.formatter import format_price
from projersey.pricing.schemas.price_output_v1 import PriceBreakdownV1
from projersey.subscriptions.service import SubscriptionDirectory

from .gateway import OUTCOME_SUCCEEDED, PaymentError, PaymentGateway
from .schemas import CheckoutInputV1, CheckoutOutputV1, PaymentStatusOutputV1

router = APIRouter(prefix="/api/checkout", tags=["checkout"])

_INTENT_ID_RE = re.compile(r"^pi_[A-Za-z0-9_]+$")


def _transaction_id() -> str:
    return f"txn_{int(time.time() * 1000)}_{uuid4().hex[:8]}"


@router.post("/create-payment-intent", response_model=CheckoutOutputV1)
def create_payment_intent(
    payload: CheckoutInputV1,
    engine: PriceEngine = Depends(get_price_engine),
    directory: SubscriptionDirectory = Depends(get_subscription_directory),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> CheckoutOutputV1:
    """
    Authoritative price computation: the breakdown is rebuilt from the order
    and the server-side subscription status, and exactly its grand total is
    charged.
    """
    settings = get_settings()
    transaction_id = _transaction_id()
    log = logger.bind(
        transaction_id=transaction_id,
        client_request_id=payload.request_id,
        customer_id=payload.customer_id,
    )

    is_subscriber = directory.is_subscribed(payload.customer_id)
    try:
        pb = engine.compute_breakdown(payload.order.to_snapshot(is_subscriber=is_subscriber))
    except InvalidInput as e:
        log.info("checkout_rejected", code=e.code)
        payment_intent_counter.labels(result="rejected").inc()
        raise invalid_input_exception(e)

    if payload.expected_grand_total is not None and payload.expected_grand_total != pb.grand_total:
        log.info(
            "checkout_stale_breakdown",
            expected=payload.expected_grand_total,
            actual=pb.grand_total,
        )
        payment_intent_counter.labels(result="stale").inc()
        raise HTTPException(
            status_code=409,
            detail={
                "success": False,
                "code": "STALE_BREAKDOWN",
                "message": "Order total changed, please review the updated price",
                "grandTotal": pb.grand_total,
                "transactionId": transaction_id,
            },
        )

    if pb.grand_total < settings.payment_min_amount_minor:
        log.info("checkout_amount_too_low", amount=pb.grand_total)
        payment_intent_counter.labels(result="too_low").inc()
        raise HTTPException(
            status_code=400,
            detail={
                "success": False,
                "code": "AMOUNT_TOO_LOW",
                "message": "Amount must be at least "
                f"{format_price(settings.payment_min_amount_minor, settings.currency)}",
                "transactionId": transaction_id,
            },
        )

    try:
        intent = gateway.create_payment_intent(
            pb.grand_total,
            settings.currency,
            customer_id=payload.customer_id,
            metadata={"transactionId": transaction_id, "itemCount": str(pb.item_count)},
            idempotency_key=transaction_id,
        )
    except PaymentError as e:
        log.warning("payment_intent_failed", kind=e.kind, detail=e.detail)
        payment_intent_counter.labels(result=e.kind).inc()
        raise HTTPException(
            status_code=e.status_code,
            detail={
                "success": False,
                "code": e.kind.upper(),
                "message": e.message,
                "transactionId": transaction_id,
            },
        )

    log.info("payment_intent_created", payment_intent_id=intent.id, amount=intent.amount)
    payment_intent_counter.labels(result="created").inc()
    grand_total_hist.observe(pb.grand_total)

    return CheckoutOutputV1(
        client_secret=intent.client_secret,
        payment_intent_id=intent.id,
        amount=pb.grand_total,
        currency=settings.currency,
        transaction_id=transaction_id,
        breakdown=PriceBreakdownV1.from_domain(pb),
    )


@router.get("/status/{payment_intent_id}", response_model=PaymentStatusOutputV1)
def payment_status(
    payment_intent_id: str,
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> PaymentStatusOutputV1:
    """Terminal view of a payment: succeeded, failed, or still pending."""
    if not _INTENT_ID_RE.match(payment_intent_id):
        raise HTTPException(
            status_code=400,
            detail={
                "success": False,
                "code": "INVALID_PAYMENT_INTENT_ID",
                "message": "Malformed payment intent id",
            },
        )

    log = logger.bind(payment_intent_id=payment_intent_id)
    try:
        st = gateway.retrieve_payment_intent(payment_intent_id)
    except PaymentError as e:
        log.warning("payment_status_failed", kind=e.kind, detail=e.detail)
        raise HTTPException(
            status_code=e.status_code,
            detail={"success": False, "code": e.kind.upper(), "message": e.message},
        )

    payment_outcome_counter.labels(outcome=st.outcome).inc()
    log.info("payment_status_checked", status=st.status, outcome=st.outcome, amount=st.amount)

    return PaymentStatusOutputV1(
        payment_intent_id=st.id,
        status=st.status,
        outcome=st.outcome,
        paid=st.outcome == OUTCOME_SUCCEEDED,
        amount=st.amount,
        currency=st.currency,
        failure_message=st.failure_message,
    )
