from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Tuple

from .money import apply_rate

D = Decimal


def calc_tax(subtotal_after_discounts: int, shipping_cost: int, rate: D) -> Tuple[int, Dict[str, Any]]:
    taxable = subtotal_after_discounts + shipping_cost
    return apply_rate(taxable, rate), {"taxable": taxable, "rate": str(rate)}
