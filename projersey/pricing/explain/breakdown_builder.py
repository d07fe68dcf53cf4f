from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List

from ..calculators.tier_discount import lookup_tier
from ..constants import DEFAULT_CURRENCY
from ..engine.context import PriceBreakdown
from ..engine.rules import PricingRules
from .formatter import format_price, format_rate


class BreakdownKind(str, Enum):
    STEP = "STEP"
    META = "META"


_CODE_RE = re.compile(r"^[A-Z][A-Z0-9_]{2,63}$")  # e.g. BASE, TIER_DISCOUNT


def _validate_code(code: str) -> str:
    if not isinstance(code, str):
        raise TypeError("breakdown code must be str")
    code = code.strip()
    if not _CODE_RE.match(code):
        raise ValueError(
            f"invalid breakdown code '{code}'. Expected UPPER_SNAKE (3-64 chars), e.g. BASE, TAX"
        )
    return code


def _validate_message(message: str) -> str:
    if not isinstance(message, str):
        raise TypeError("breakdown message must be str")
    msg = message.strip()
    if not msg:
        raise ValueError("breakdown message must be non-empty")
    # Rendered as one line in the cart, on receipts and in mails
    if "\n" in msg or "\r" in msg or "\t" in msg:
        raise ValueError("breakdown message must be a single line without tabs")
    if len(msg) > 240:
        raise ValueError("breakdown message too long (max 240 chars)")
    return msg


@dataclass(frozen=True)
class BreakdownEntry:
    seq: int
    kind: BreakdownKind
    code: str
    message: str


@dataclass
class Breakdown:
    """
    Ordered explanation of a price computation.

    Iterating yields the rendered strings; entries keep the codes for tests.
    """

    _entries: List[BreakdownEntry] = field(default_factory=list)
    _seq: int = 0

    @property
    def entries(self) -> List[BreakdownEntry]:
        return list(self._entries)

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self._entries]

    def as_strings(self) -> List[str]:
        return BreakdownBuilder().build(self)

    def __iter__(self) -> Iterator[str]:
        return iter(self.as_strings())

    def __len__(self) -> int:
        return len(self._entries)

    def add_step(self, code: str, message: str) -> None:
        self._append(BreakdownKind.STEP, code, message)

    def add_meta(self, code: str, message: str) -> None:
        self._append(BreakdownKind.META, code, message)

    def _append(self, kind: BreakdownKind, code: str, message: str) -> None:
        c = _validate_code(code)
        m = _validate_message(message)
        self._seq += 1
        self._entries.append(BreakdownEntry(seq=self._seq, kind=kind, code=c, message=m))


class BreakdownBuilder:
    """Breakdown -> list[str], in insertion order."""

    def build(self, breakdown: Breakdown) -> List[str]:
        if not isinstance(breakdown, Breakdown):
            raise TypeError("BreakdownBuilder.build expects a Breakdown instance")
        entries = sorted(breakdown.entries, key=lambda e: e.seq)
        return [self._render(e) for e in entries]

    def _render(self, e: BreakdownEntry) -> str:
        if e.kind == BreakdownKind.META:
            return f"META: {e.message}"
        return e.message


def explain_breakdown(
    pb: PriceBreakdown, rules: PricingRules, currency: str = DEFAULT_CURRENCY
) -> Breakdown:
    """
    Policy: steps only for components with an effect, meta lines for
    components that were evaluated but did not change the price.
    """
    bd = Breakdown()

    def fmt(amount: int) -> str:
        return format_price(amount, currency)

    if pb.item_count == 0:
        bd.add_meta("EMPTY_ORDER", "No items in order")
        return bd

    noun = "item" if pb.item_count == 1 else "items"
    bd.add_step("BASE", f"Base total ({pb.item_count} {noun}): {fmt(pb.base_total)}")

    if pb.tier_discount_applied:
        tier = lookup_tier(pb.item_count, rules.tier_discounts)
        min_items = tier.min_items if tier else pb.item_count
        bd.add_step(
            "TIER_DISCOUNT",
            f"{format_rate(pb.tier_discount_rate)} off {min_items}+ items: -{fmt(pb.tier_discount_amount)}",
        )
    else:
        bd.add_meta("TIER_DISCOUNT", "Quantity discount: none")

    if pb.subscription_discount_applied:
        bd.add_step(
            "SUBSCRIPTION_DISCOUNT",
            f"{format_rate(rules.subscription_discount_rate)} Pro subscriber discount: "
            f"-{fmt(pb.subscription_discount_amount)}",
        )

    if pb.shipping_free_threshold_applied:
        bd.add_step(
            "SHIPPING",
            f"Shipping: FREE (orders over {fmt(rules.shipping.free_threshold_minor)})",
        )
    else:
        bd.add_step("SHIPPING", f"Shipping: +{fmt(pb.shipping_cost)}")

    bd.add_step("TAX", f"Tax {format_rate(rules.tax_rate)}: +{fmt(pb.tax_amount)}")
    bd.add_step("GRAND_TOTAL", f"Grand total: {fmt(pb.grand_total)}")
    return bd
