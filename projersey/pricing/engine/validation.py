from __future__ import annotations

from typing import Any, Set

from ..errors import (
    INVALID_ITEM,
    INVALID_QUANTITY,
    MALFORMED_ROSTER,
    NEGATIVE_PRICE,
    InvalidInput,
)
from .context import OrderSnapshot


def _is_int(value: Any) -> bool:
    # bool is an int subclass; True is not a quantity
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_priced(item: Any, where: str) -> None:
    sku = str(getattr(item, "sku_or_type", "") or "").strip()
    if not sku:
        raise InvalidInput(INVALID_ITEM, f"{where}: sku_or_type is required", {"where": where})

    price = item.unit_price_minor
    if not _is_int(price):
        raise InvalidInput(
            INVALID_ITEM,
            f"{where}: unit_price_minor must be an integer amount of minor units",
            {"where": where, "sku": sku, "unitPriceMinor": repr(price)},
        )
    if price < 0:
        raise InvalidInput(
            NEGATIVE_PRICE,
            f"{where}: unit price may not be negative",
            {"where": where, "sku": sku, "unitPriceMinor": price},
        )

    qty = item.quantity
    if not _is_int(qty) or qty < 1:
        raise InvalidInput(
            INVALID_QUANTITY,
            f"{where}: quantity must be an integer >= 1",
            {"where": where, "sku": sku, "quantity": repr(qty)},
        )


def validate_snapshot(snapshot: OrderSnapshot) -> None:
    """
    Reject a snapshot before any arithmetic happens.

    Zero unit prices are accepted (free add-ons); negative prices, quantities
    below 1 and malformed rosters are not.
    """
    if not isinstance(snapshot, OrderSnapshot):
        raise InvalidInput(INVALID_ITEM, "expected an OrderSnapshot")

    for i, item in enumerate(snapshot.line_items or []):
        _validate_priced(item, f"lineItems[{i}]")

    for i, addon in enumerate(snapshot.add_ons or []):
        if not str(getattr(addon, "kind", "") or "").strip():
            raise InvalidInput(
                INVALID_ITEM, f"addOns[{i}]: kind is required", {"where": f"addOns[{i}]"}
            )
        _validate_priced(addon, f"addOns[{i}]")

    if snapshot.roster is None:
        return

    seen: Set[str] = set()
    for i, member in enumerate(snapshot.roster):
        member_id = str(getattr(member, "member_id", "") or "").strip()
        if not member_id:
            raise InvalidInput(
                MALFORMED_ROSTER, f"roster[{i}]: member_id is required", {"index": i}
            )
        if member_id in seen:
            raise InvalidInput(
                MALFORMED_ROSTER,
                f"roster[{i}]: duplicate member_id {member_id}",
                {"index": i, "memberId": member_id},
            )
        seen.add(member_id)

        if member.quantity != 1 or not _is_int(member.quantity):
            raise InvalidInput(
                MALFORMED_ROSTER,
                f"roster[{i}]: each member receives exactly one jersey",
                {"index": i, "memberId": member_id, "quantity": repr(member.quantity)},
            )
