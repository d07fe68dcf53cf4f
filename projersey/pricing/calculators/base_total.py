from __future__ import annotations

from typing import Any, Dict, Tuple

from ..engine.context import OrderSnapshot


def calc_base_total(snapshot: OrderSnapshot) -> Tuple[int, int, Dict[str, Any]]:
    """
    Returns (base_total, item_count, meta).

    Team orders price the first jersey-type line per roster member: the roster
    size replaces that line's quantity, it is never added to it.
    """
    base_total = 0
    item_count = 0
    meta: Dict[str, Any] = {"rosterApplied": False}

    jersey_replaced = False
    for item in snapshot.line_items:
        qty = item.quantity
        if snapshot.uses_roster and not jersey_replaced and item.is_jersey:
            qty = len(snapshot.roster or [])
            jersey_replaced = True
            meta.update(
                {
                    "rosterApplied": True,
                    "rosterSize": qty,
                    "replacedQuantity": item.quantity,
                    "jerseySku": item.sku_or_type,
                }
            )
        base_total += item.unit_price_minor * qty
        item_count += qty

    for addon in snapshot.add_ons:
        base_total += addon.line_total_minor
        item_count += addon.quantity

    return base_total, item_count, meta
