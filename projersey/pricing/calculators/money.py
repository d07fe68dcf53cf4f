from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

D = Decimal

MINOR_UNIT = D("1")


def round_half_up(x: D) -> int:
    """Round a Decimal amount of minor units to a whole minor unit, half up."""
    return int(D(x).quantize(MINOR_UNIT, rounding=ROUND_HALF_UP))


def apply_rate(amount_minor: int, rate: D) -> int:
    return round_half_up(D(amount_minor) * rate)
