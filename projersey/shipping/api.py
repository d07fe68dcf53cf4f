from __future__ import annotations

from typing import Any, Dict, Union

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from projersey.core.logging_config import logger
from projersey.dependencies import get_shipping_service

from .schemas import AddressValidateInputV1, ShippingCalculateInputV1, ShippingCalculateOutputV1
from .service import ShippingService

router = APIRouter(prefix="/api/shipping", tags=["shipping"])


@router.post("/calculate", response_model=ShippingCalculateOutputV1)
def calculate_shipping(
    payload: ShippingCalculateInputV1,
    service: ShippingService = Depends(get_shipping_service),
) -> ShippingCalculateOutputV1:
    address = payload.shipping_address.to_domain()
    missing = address.missing_fields()
    if missing:
        raise HTTPException(status_code=400, detail=f"Missing required address field: {missing[0]}")

    quote = service.quote(address, [i.to_domain() for i in payload.items], payload.subtotal)
    logger.bind(
        country=address.country,
        subtotal=payload.subtotal,
        options=[o.id for o in quote.options],
    ).info("shipping_quote")
    return ShippingCalculateOutputV1.from_domain(quote)


@router.post("/validate-address", response_model=None)
def validate_address(payload: AddressValidateInputV1) -> Union[Dict[str, Any], JSONResponse]:
    # Format check only; no external address verification
    address = payload.address.to_domain()
    if address.missing_fields():
        return JSONResponse(
            status_code=400,
            content={"valid": False, "message": "Missing required address fields"},
        )

    return {
        "valid": True,
        "standardizedAddress": payload.address.model_dump(by_alias=True),
        "message": "Address is valid",
    }
