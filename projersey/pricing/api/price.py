from __future__ import annotations

import time
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request

from projersey.config import get_settings
from projersey.core.logging_config import logger
from projersey.dependencies import get_price_engine
from projersey.observability.metrics import price_estimate_counter
from projersey.pricing.engine.price_engine import PriceEngine
from projersey.pricing.errors import InvalidInput
from projersey.pricing.explain.breakdown_builder import explain_breakdown
from projersey.pricing.explain.formatter import format_breakdown
from projersey.pricing.schemas.price_input_v1 import PriceEstimateInputV1
from projersey.pricing.schemas.price_output_v1 import PriceBreakdownV1, PriceEstimateOutputV1

router = APIRouter(prefix="/api/price", tags=["price"])


def invalid_input_exception(e: InvalidInput) -> HTTPException:
    return HTTPException(status_code=422, detail={"success": False, **e.to_dict()})


def _log_obs(
    *,
    request: Request,
    endpoint: str,
    payload: PriceEstimateInputV1,
    duration_ms: float,
    result: str,
    event: str,
    status_code: int,
) -> None:
    request_id = getattr(request.state, "request_id", None) or request.headers.get(
        "X-Request-ID", "unknown"
    )
    logger.bind(
        request_id=request_id,
        endpoint=endpoint,
        line_count=len(payload.line_items),
        addon_count=len(payload.add_ons),
        team_order=payload.is_team_order,
        duration_ms=duration_ms,
        result=result,
        status_code=status_code,
    ).info(event)


@router.post("/estimate", response_model=PriceEstimateOutputV1)
def estimate_price(
    payload: PriceEstimateInputV1,
    request: Request,
    engine: PriceEngine = Depends(get_price_engine),
) -> PriceEstimateOutputV1:
    """
    Breakdown for the cart page. Display only: checkout recomputes before
    charging.
    """
    t0 = time.time()
    currency = get_settings().currency

    try:
        pb = engine.compute_breakdown(payload.to_estimate_snapshot())
    except InvalidInput as e:
        _log_obs(
            request=request,
            endpoint="/api/price/estimate",
            payload=payload,
            duration_ms=round((time.time() - t0) * 1000, 2),
            result=f"rejected:{e.code}",
            event="price_estimate",
            status_code=422,
        )
        price_estimate_counter.labels(result="rejected").inc()
        raise invalid_input_exception(e)

    steps = explain_breakdown(pb, engine.rules, currency).as_strings()

    _log_obs(
        request=request,
        endpoint="/api/price/estimate",
        payload=payload,
        duration_ms=round((time.time() - t0) * 1000, 2),
        result="ok",
        event="price_estimate",
        status_code=200,
    )
    price_estimate_counter.labels(result="ok").inc()

    return PriceEstimateOutputV1(
        currency=currency,
        breakdown=PriceBreakdownV1.from_domain(pb),
        formatted=format_breakdown(pb, currency),
        steps=steps,
    )


@router.get("/rules")
def pricing_rules(engine: PriceEngine = Depends(get_price_engine)) -> Dict[str, Any]:
    return engine.rules.describe()
