from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Tuple

from .money import apply_rate

D = Decimal


def calc_subscription_discount(
    amount_after_tier: int, is_subscriber: bool, rate: D
) -> Tuple[bool, int, Dict[str, Any]]:
    # Composes with the tier discount: taken from what remains after it
    if not is_subscriber:
        return False, 0, {"reason": "not_subscriber"}
    if rate <= 0:
        return False, 0, {"reason": "rate<=0"}

    amount = apply_rate(amount_after_tier, rate)
    return True, amount, {"rate": str(rate), "base": amount_after_tier}
