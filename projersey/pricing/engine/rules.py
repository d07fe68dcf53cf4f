from __future__ import annotations

import json
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml
from jsonschema import validate

from .. import constants as C

D = Decimal

SCHEMA_PATH = Path(__file__).resolve().parents[1] / "schemas" / "pricing_rules.schema.json"


def _pct_to_rate(value: Any, name: str) -> D:
    try:
        pct = D(str(value))
    except InvalidOperation:
        raise ValueError(f"{name}: not a number: {value!r}")
    if not pct.is_finite():
        raise ValueError(f"{name}: not a finite number: {value!r}")
    rate = pct / D("100")
    if rate < 0 or rate >= 1:
        raise ValueError(f"{name}: percent must be in [0, 100), got {value}")
    return rate


def _rate_to_pct(rate: D) -> str:
    return f"{(rate * 100).normalize():f}"


@dataclass(frozen=True)
class TierDiscount:
    min_items: int
    rate: D


@dataclass(frozen=True)
class ShippingRates:
    free_threshold_minor: int = C.SHIPPING_FREE_THRESHOLD_MINOR
    mid_threshold_minor: int = C.SHIPPING_MID_THRESHOLD_MINOR
    base_rate_minor: int = C.SHIPPING_BASE_RATE_MINOR
    mid_rate_minor: int = C.SHIPPING_MID_RATE_MINOR


def _default_tiers() -> Tuple[TierDiscount, ...]:
    return tuple(TierDiscount(min_items=m, rate=r) for m, r in C.TIER_DISCOUNTS)


@dataclass(frozen=True)
class PricingRules:
    """
    Immutable parameter set of the price engine.

    Defaults are the canonical constants; from_yaml_file() loads an
    alternative set (validated against the JSON schema first, then
    cross-validated here).
    """

    version: str = "v1"
    tier_discounts: Tuple[TierDiscount, ...] = field(default_factory=_default_tiers)
    subscription_discount_rate: D = C.SUBSCRIPTION_DISCOUNT_RATE
    shipping: ShippingRates = field(default_factory=ShippingRates)
    tax_rate: D = C.TAX_RATE

    def __post_init__(self) -> None:
        # Lookup relies on highest threshold first
        ordered = tuple(sorted(self.tier_discounts, key=lambda t: t.min_items, reverse=True))
        object.__setattr__(self, "tier_discounts", ordered)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "PricingRules":
        tiers: List[TierDiscount] = []
        for i, t in enumerate(d.get("tierDiscounts") or []):
            min_items = int(t["minItems"])
            if min_items < 1:
                raise ValueError(f"tierDiscounts[{i}]: minItems must be >= 1")
            tiers.append(
                TierDiscount(
                    min_items=min_items,
                    rate=_pct_to_rate(t["percent"], f"tierDiscounts[{i}]"),
                )
            )

        thresholds = [t.min_items for t in tiers]
        if len(thresholds) != len(set(thresholds)):
            seen, dups = set(), []
            for m in thresholds:
                if m in seen and m not in dups:
                    dups.append(m)
                seen.add(m)
            raise ValueError(f"Duplicate tier thresholds: {dups}")

        s = d.get("shipping") or {}
        shipping = ShippingRates(
            free_threshold_minor=int(s.get("freeThresholdMinor", C.SHIPPING_FREE_THRESHOLD_MINOR)),
            mid_threshold_minor=int(s.get("midThresholdMinor", C.SHIPPING_MID_THRESHOLD_MINOR)),
            base_rate_minor=int(s.get("baseRateMinor", C.SHIPPING_BASE_RATE_MINOR)),
            mid_rate_minor=int(s.get("midRateMinor", C.SHIPPING_MID_RATE_MINOR)),
        )
        for name in ("free_threshold_minor", "mid_threshold_minor", "base_rate_minor", "mid_rate_minor"):
            if getattr(shipping, name) < 0:
                raise ValueError(f"shipping.{name} may not be negative")
        if shipping.mid_threshold_minor > shipping.free_threshold_minor:
            raise ValueError("shipping.midThresholdMinor may not exceed freeThresholdMinor")

        sub_pct = d.get("subscriptionDiscountPercent")
        tax_pct = d.get("taxPercent")

        return PricingRules(
            version=str(d.get("version") or "v1"),
            tier_discounts=tuple(tiers),
            subscription_discount_rate=(
                _pct_to_rate(sub_pct, "subscriptionDiscountPercent")
                if sub_pct is not None
                else C.SUBSCRIPTION_DISCOUNT_RATE
            ),
            shipping=shipping,
            tax_rate=_pct_to_rate(tax_pct, "taxPercent") if tax_pct is not None else C.TAX_RATE,
        )

    @classmethod
    def from_yaml_file(cls, path: str) -> "PricingRules":
        rules_path = Path(path)

        with rules_path.open("r", encoding="utf-8") as f:
            d = yaml.safe_load(f)

        with SCHEMA_PATH.open("r", encoding="utf-8") as f:
            schema = json.load(f)

        validate(instance=d, schema=schema)
        return cls.from_dict(d)

    def describe(self) -> Dict[str, Any]:
        """Public view of the rules (served as-is by GET /api/price/rules)."""
        return {
            "version": self.version,
            "tierDiscounts": [
                {"minItems": t.min_items, "discount": f"{_rate_to_pct(t.rate)}%"}
                for t in self.tier_discounts
            ],
            "subscriptionDiscount": f"{_rate_to_pct(self.subscription_discount_rate)}%",
            "shipping": {
                "freeAboveMinor": self.shipping.free_threshold_minor,
                "midFromMinor": self.shipping.mid_threshold_minor,
                "midRateMinor": self.shipping.mid_rate_minor,
                "baseRateMinor": self.shipping.base_rate_minor,
            },
            "tax": f"{_rate_to_pct(self.tax_rate)}%",
        }


DEFAULT_RULES = PricingRules()
