# projersey/observability/metrics.py
from fastapi import APIRouter
from starlette.responses import Response

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

router = APIRouter(tags=["observability"])

price_estimate_counter = Counter(
    "projersey_price_estimate_total",
    "Price estimates",
    ["result"],  # ok|rejected
)

payment_intent_counter = Counter(
    "projersey_payment_intent_total",
    "Payment intent requests",
    ["result"],  # created|stale|too_low|rejected|<payment error kind>
)

payment_outcome_counter = Counter(
    "projersey_payment_outcome_total",
    "Payment intent outcomes seen on status checks",
    ["outcome"],  # succeeded|failed|pending
)

grand_total_hist = Histogram(
    "projersey_grand_total_minor",
    "Charged grand totals in minor units",
    buckets=(1000, 2500, 5000, 10000, 25000, 50000, 100000, 250000),
)

latency_hist = Histogram(
    "projersey_api_latency_seconds",
    "API latency per route",
    ["route"],
)


@router.get("/metrics", include_in_schema=True)
def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
