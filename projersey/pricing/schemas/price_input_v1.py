# projersey/pricing/schemas/price_input_v1.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..engine.context import AddOn, Gender, LineItem, OrderSnapshot, RosterMember, Size


class _CamelModel(BaseModel):
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


class LineItemV1(_CamelModel):
    # Shape only; semantic checks (negative price, qty < 1) belong to the engine
    sku_or_type: str
    unit_price_minor: int
    quantity: int
    size: Size
    gender: Gender

    def to_domain(self) -> LineItem:
        return LineItem(
            sku_or_type=self.sku_or_type,
            unit_price_minor=self.unit_price_minor,
            quantity=self.quantity,
            size=self.size,
            gender=self.gender,
        )


class AddOnV1(_CamelModel):
    kind: str
    sku_or_type: str
    unit_price_minor: int
    quantity: int
    size: Optional[Size] = None
    gender: Optional[Gender] = None

    def to_domain(self) -> AddOn:
        return AddOn(
            kind=self.kind,
            sku_or_type=self.sku_or_type,
            unit_price_minor=self.unit_price_minor,
            quantity=self.quantity,
            size=self.size,
            gender=self.gender,
        )


class RosterMemberV1(_CamelModel):
    member_id: str
    size: Size
    gender: Gender
    quantity: int = 1

    def to_domain(self) -> RosterMember:
        return RosterMember(
            member_id=self.member_id,
            size=self.size,
            gender=self.gender,
            quantity=self.quantity,
        )


class OrderInputV1(_CamelModel):
    """Cart contents as the storefront sends them."""

    line_items: List[LineItemV1] = Field(default_factory=list)
    add_ons: List[AddOnV1] = Field(default_factory=list)
    is_team_order: bool = False
    roster: Optional[List[RosterMemberV1]] = None

    def to_snapshot(self, *, is_subscriber: bool) -> OrderSnapshot:
        return OrderSnapshot(
            line_items=[i.to_domain() for i in self.line_items],
            add_ons=[a.to_domain() for a in self.add_ons],
            is_team_order=self.is_team_order,
            roster=[m.to_domain() for m in self.roster] if self.roster is not None else None,
            is_subscriber=is_subscriber,
        )


class PriceEstimateInputV1(OrderInputV1):
    # Estimates trust the client flag; checkout looks the status up itself
    is_subscriber: bool = False

    def to_estimate_snapshot(self) -> OrderSnapshot:
        return self.to_snapshot(is_subscriber=self.is_subscriber)
