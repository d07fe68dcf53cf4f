# projersey/pricing/schemas/price_output_v1.py
from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..engine.context import PriceBreakdown


class PriceBreakdownV1(BaseModel):
    """All amounts in minor units of the configured currency."""

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    base_total: int
    item_count: int
    tier_discount_rate: float
    tier_discount_applied: bool
    tier_discount_amount: int
    subscription_discount_applied: bool
    subscription_discount_amount: int
    discount_total: int
    discount_percentage: float
    subtotal_after_discounts: int
    shipping_cost: int
    shipping_free_threshold_applied: bool
    price_before_tax: int
    tax_amount: int
    grand_total: int

    @classmethod
    def from_domain(cls, pb: PriceBreakdown) -> "PriceBreakdownV1":
        return cls(
            base_total=pb.base_total,
            item_count=pb.item_count,
            tier_discount_rate=float(pb.tier_discount_rate),
            tier_discount_applied=pb.tier_discount_applied,
            tier_discount_amount=pb.tier_discount_amount,
            subscription_discount_applied=pb.subscription_discount_applied,
            subscription_discount_amount=pb.subscription_discount_amount,
            discount_total=pb.discount_total,
            discount_percentage=float(pb.discount_percentage),
            subtotal_after_discounts=pb.subtotal_after_discounts,
            shipping_cost=pb.shipping_cost,
            shipping_free_threshold_applied=pb.shipping_free_threshold_applied,
            price_before_tax=pb.price_before_tax,
            tax_amount=pb.tax_amount,
            grand_total=pb.grand_total,
        )


class PriceEstimateOutputV1(BaseModel):
    model_config = ConfigDict(extra="forbid")

    success: bool = True
    currency: str
    breakdown: PriceBreakdownV1
    formatted: Dict[str, str]
    steps: List[str]
