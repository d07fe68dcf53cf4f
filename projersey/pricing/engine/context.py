from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from ..constants import JERSEY_TYPE, JERSEY_TYPE_SUFFIX

D = Decimal


class Size(str, Enum):
    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "XXL"


class Gender(str, Enum):
    MENS = "mens"
    WOMENS = "womens"
    YOUTH = "youth"


# -----------------------------
# Input models
# -----------------------------


@dataclass(frozen=True)
class LineItem:
    sku_or_type: str
    unit_price_minor: int
    quantity: int
    size: Size
    gender: Gender

    @property
    def is_jersey(self) -> bool:
        t = str(self.sku_or_type).strip().lower()
        return t == JERSEY_TYPE or t.endswith(JERSEY_TYPE_SUFFIX)

    @property
    def line_total_minor(self) -> int:
        return self.unit_price_minor * self.quantity


@dataclass(frozen=True)
class AddOn:
    """
    Optional extra (name printing, team badge, matching socks, ...).
    Priced at its own quantity, never as a percentage of the order.
    """

    kind: str
    sku_or_type: str
    unit_price_minor: int
    quantity: int
    size: Optional[Size] = None
    gender: Optional[Gender] = None

    @property
    def line_total_minor(self) -> int:
        return self.unit_price_minor * self.quantity


@dataclass(frozen=True)
class RosterMember:
    member_id: str
    size: Size
    gender: Gender
    quantity: int = 1


@dataclass(frozen=True)
class OrderSnapshot:
    """
    The only input of the price engine. Built fresh by the caller for every
    recomputation; the engine keeps nothing between calls.
    """

    line_items: List[LineItem] = field(default_factory=list)
    add_ons: List[AddOn] = field(default_factory=list)
    is_team_order: bool = False
    roster: Optional[List[RosterMember]] = None
    is_subscriber: bool = False

    @property
    def uses_roster(self) -> bool:
        return bool(self.is_team_order and self.roster)


# -----------------------------
# Output model
# -----------------------------


@dataclass(frozen=True)
class PriceBreakdown:
    base_total: int
    item_count: int
    tier_discount_rate: D
    tier_discount_amount: int
    subscription_discount_applied: bool
    subscription_discount_amount: int
    subtotal_after_discounts: int
    shipping_cost: int
    shipping_free_threshold_applied: bool
    tax_amount: int
    grand_total: int

    @property
    def tier_discount_applied(self) -> bool:
        return self.tier_discount_amount > 0

    @property
    def discount_total(self) -> int:
        return self.tier_discount_amount + self.subscription_discount_amount

    @property
    def discount_percentage(self) -> D:
        # Empty orders have no base to divide by
        if self.base_total == 0:
            return D("0")
        return (D(self.discount_total) / D(self.base_total)).quantize(D("0.0001"))

    @property
    def price_before_tax(self) -> int:
        return self.subtotal_after_discounts + self.shipping_cost

    @classmethod
    def empty(cls) -> "PriceBreakdown":
        return cls(
            base_total=0,
            item_count=0,
            tier_discount_rate=D("0"),
            tier_discount_amount=0,
            subscription_discount_applied=False,
            subscription_discount_amount=0,
            subtotal_after_discounts=0,
            shipping_cost=0,
            shipping_free_threshold_applied=False,
            tax_amount=0,
            grand_total=0,
        )
