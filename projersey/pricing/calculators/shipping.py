from __future__ import annotations

from typing import Any, Dict, Tuple

from ..engine.rules import ShippingRates


def calc_shipping(
    subtotal_after_discounts: int, item_count: int, rates: ShippingRates
) -> Tuple[int, bool, Dict[str, Any]]:
    """
    Returns (cost, free_threshold_applied, meta).

    Evaluated on the post-discount subtotal. Nothing to ship means no charge.
    """
    if item_count == 0:
        return 0, False, {"reason": "no_items"}

    if subtotal_after_discounts > rates.free_threshold_minor:
        return 0, True, {"tier": "free", "threshold": rates.free_threshold_minor}

    if subtotal_after_discounts >= rates.mid_threshold_minor:
        return rates.mid_rate_minor, False, {"tier": "mid", "threshold": rates.mid_threshold_minor}

    return rates.base_rate_minor, False, {"tier": "base"}
