# projersey/pricing/constants.py
"""
Canonical pricing constants.

Single source for every number the engine uses. PricingRules() defaults to
these values; a YAML rule set may override them per deployment.
"""
from __future__ import annotations

from decimal import Decimal

D = Decimal

# Tier discounts keyed on total item count, highest threshold first.
TIER_DISCOUNTS = (
    (50, D("0.15")),
    (20, D("0.10")),
    (10, D("0.05")),
)

SUBSCRIPTION_DISCOUNT_RATE = D("0.10")

# Shipping is evaluated on the subtotal after discounts.
SHIPPING_FREE_THRESHOLD_MINOR = 20000  # strictly greater -> free
SHIPPING_MID_THRESHOLD_MINOR = 10000  # greater or equal -> mid rate
SHIPPING_MID_RATE_MINOR = 2000
SHIPPING_BASE_RATE_MINOR = 3000

TAX_RATE = D("0.07")

# Line items whose type matches one of these are replaced by the roster size
# on team orders.
JERSEY_TYPE = "jersey"
JERSEY_TYPE_SUFFIX = "_jersey"

DEFAULT_CURRENCY = "usd"
