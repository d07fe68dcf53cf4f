from __future__ import annotations

from decimal import Decimal
from typing import Dict

from ..constants import DEFAULT_CURRENCY
from ..engine.context import PriceBreakdown

D = Decimal

_SYMBOLS = {"usd": "$", "eur": "€", "gbp": "£"}


def format_price(amount_minor: int, currency: str = DEFAULT_CURRENCY) -> str:
    """1234567 -> "$12,345.67". Negative amounts keep the sign in front."""
    cur = (currency or DEFAULT_CURRENCY).lower()
    symbol = _SYMBOLS.get(cur, f"{cur.upper()} ")
    sign = "-" if amount_minor < 0 else ""
    major = D(abs(int(amount_minor))) / D("100")
    return f"{sign}{symbol}{major:,.2f}"


def format_rate(rate: D) -> str:
    return f"{(D(rate) * 100).normalize():f}%"


def format_breakdown(breakdown: PriceBreakdown, currency: str = DEFAULT_CURRENCY) -> Dict[str, str]:
    """Display strings for every amount of a breakdown."""
    if breakdown.item_count > 0 and breakdown.shipping_cost == 0:
        shipping = "FREE"
    else:
        shipping = format_price(breakdown.shipping_cost, currency)

    return {
        "baseTotal": format_price(breakdown.base_total, currency),
        "tierDiscount": format_price(breakdown.tier_discount_amount, currency),
        "subscriptionDiscount": format_price(breakdown.subscription_discount_amount, currency),
        "subtotal": format_price(breakdown.subtotal_after_discounts, currency),
        "shipping": shipping,
        "tax": format_price(breakdown.tax_amount, currency),
        "grandTotal": format_price(breakdown.grand_total, currency),
    }
