from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Sequence, Tuple

from ..engine.rules import TierDiscount
from .money import apply_rate

D = Decimal


def lookup_tier(item_count: int, tiers: Sequence[TierDiscount]) -> TierDiscount | None:
    # tiers are sorted highest threshold first; first match wins, no stacking
    for t in tiers:
        if item_count >= t.min_items:
            return t
    return None


def calc_tier_discount(
    base_total: int, item_count: int, tiers: Sequence[TierDiscount]
) -> Tuple[D, int, Dict[str, Any]]:
    """Returns (rate, amount, meta). Amount is a positive number of minor units."""
    chosen = lookup_tier(item_count, tiers)
    if chosen is None:
        return D("0"), 0, {"reason": "no_match", "itemCount": item_count}

    amount = apply_rate(base_total, chosen.rate)
    return chosen.rate, amount, {"minItems": chosen.min_items, "itemCount": item_count}
