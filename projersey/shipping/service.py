from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from projersey.pricing.calculators.shipping import calc_shipping
from projersey.pricing.engine.rules import DEFAULT_RULES, PricingRules

EXPRESS_SURCHARGE_MINOR = 1299
OVERNIGHT_SURCHARGE_MINOR = 2999
OVERNIGHT_MAX_QUANTITY = 5
OVERNIGHT_MAX_SUBTOTAL_MINOR = 50000

REQUIRED_ADDRESS_FIELDS = ("street", "city", "state", "postal_code", "country")


@dataclass(frozen=True)
class ShippingAddress:
    name: str
    street: str
    city: str
    state: str
    postal_code: str
    country: str

    def missing_fields(self) -> List[str]:
        return [f for f in REQUIRED_ADDRESS_FIELDS if not str(getattr(self, f) or "").strip()]


@dataclass(frozen=True)
class ShipmentItem:
    quantity: int
    weight: Optional[float] = None
    size: Optional[str] = None


@dataclass(frozen=True)
class ShippingOption:
    id: str
    name: str
    description: str
    price_minor: int
    estimated_delivery: str


@dataclass(frozen=True)
class ShippingQuote:
    options: List[ShippingOption]
    base_shipping_cost: int
    recommended_option_id: str


class ShippingService:
    """
    Named shipping options for the checkout page.

    The standard option is priced by the price engine's shipping step, so the
    amount shown here is the amount charged. Express and overnight are quoted
    on top of it.
    """

    def __init__(self, rules: Optional[PricingRules] = None):
        self.rules = rules or DEFAULT_RULES

    def quote(self, address: ShippingAddress, items: Sequence[ShipmentItem], subtotal_minor: int) -> ShippingQuote:
        missing = address.missing_fields()
        if missing:
            raise ValueError(f"Missing required address field: {missing[0]}")

        total_qty = sum(int(i.quantity) for i in items)
        base, _, _ = calc_shipping(subtotal_minor, total_qty, self.rules.shipping)

        options = [
            ShippingOption(
                id="standard",
                name="Standard Shipping",
                description="Standard shipping with tracking",
                price_minor=base,
                estimated_delivery="5-7 business days",
            )
        ]

        if base > 0:
            options.append(
                ShippingOption(
                    id="express",
                    name="Express Shipping",
                    description="Faster delivery with priority handling",
                    price_minor=base + EXPRESS_SURCHARGE_MINOR,
                    estimated_delivery="2-3 business days",
                )
            )

        if total_qty <= OVERNIGHT_MAX_QUANTITY and subtotal_minor < OVERNIGHT_MAX_SUBTOTAL_MINOR:
            options.append(
                ShippingOption(
                    id="overnight",
                    name="Overnight Shipping",
                    description="Next day delivery (order by 2pm)",
                    price_minor=base + OVERNIGHT_SURCHARGE_MINOR,
                    estimated_delivery="Next business day",
                )
            )

        return ShippingQuote(
            options=options,
            base_shipping_cost=base,
            recommended_option_id="standard" if base == 0 else "express",
        )
