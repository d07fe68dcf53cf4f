from __future__ import annotations

from typing import Optional

from ..calculators.base_total import calc_base_total
from ..calculators.shipping import calc_shipping
from ..calculators.subscription_discount import calc_subscription_discount
from ..calculators.tax import calc_tax
from ..calculators.tier_discount import calc_tier_discount
from .context import OrderSnapshot, PriceBreakdown
from .rules import DEFAULT_RULES, PricingRules
from .validation import validate_snapshot


class PriceEngine:
    """
    Deterministic order pricing.

    Pipeline (fixed order, each amount rounded once, never re-rounded):
      1. base total + item count (roster substitution for team orders)
      2. tier discount on base total
      3. subscription discount on what remains after the tier discount
      4. shipping on the post-discount subtotal
      5. tax on subtotal + shipping
      6. grand total = exact sum of 4..5 and the subtotal

    Holds only the (immutable) rules, so one instance may serve concurrent
    callers.
    """

    def __init__(self, rules: Optional[PricingRules] = None):
        self.rules = rules or DEFAULT_RULES

    @classmethod
    def from_yaml_file(cls, path: str) -> "PriceEngine":
        return cls(PricingRules.from_yaml_file(path))

    def compute_breakdown(self, snapshot: OrderSnapshot) -> PriceBreakdown:
        validate_snapshot(snapshot)

        base_total, item_count, _ = calc_base_total(snapshot)
        if item_count == 0:
            return PriceBreakdown.empty()

        tier_rate, tier_amount, _ = calc_tier_discount(
            base_total, item_count, self.rules.tier_discounts
        )
        after_tier = base_total - tier_amount

        sub_applied, sub_amount, _ = calc_subscription_discount(
            after_tier, snapshot.is_subscriber, self.rules.subscription_discount_rate
        )
        subtotal = after_tier - sub_amount

        shipping_cost, free_applied, _ = calc_shipping(subtotal, item_count, self.rules.shipping)
        tax_amount, _ = calc_tax(subtotal, shipping_cost, self.rules.tax_rate)

        return PriceBreakdown(
            base_total=base_total,
            item_count=item_count,
            tier_discount_rate=tier_rate,
            tier_discount_amount=tier_amount,
            subscription_discount_applied=sub_applied,
            subscription_discount_amount=sub_amount,
            subtotal_after_discounts=subtotal,
            shipping_cost=shipping_cost,
            shipping_free_threshold_applied=free_applied,
            tax_amount=tax_amount,
            grand_total=subtotal + shipping_cost + tax_amount,
        )


_default_engine = PriceEngine()


def compute_breakdown(snapshot: OrderSnapshot, rules: Optional[PricingRules] = None) -> PriceBreakdown:
    engine = _default_engine if rules is None else PriceEngine(rules)
    return engine.compute_breakdown(snapshot)
