from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from projersey.pricing.schemas.price_input_v1 import OrderInputV1
from projersey.pricing.schemas.price_output_v1 import PriceBreakdownV1


class CheckoutInputV1(BaseModel):
    """
    No amount and no subscriber flag: both are derived on the server.
    expectedGrandTotal is what the client displayed; a mismatch means the
    client breakdown is stale.
    """

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    order: OrderInputV1
    customer_id: Optional[str] = None
    expected_grand_total: Optional[int] = None
    request_id: Optional[str] = None


class CheckoutOutputV1(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    client_secret: str
    payment_intent_id: str
    amount: int
    currency: str
    transaction_id: str
    breakdown: PriceBreakdownV1


class PaymentStatusOutputV1(BaseModel):
    """outcome is succeeded, failed or pending; status is the provider's own value."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    payment_intent_id: str
    status: str
    outcome: str
    paid: bool
    amount: int
    currency: str
    failure_message: Optional[str] = None
