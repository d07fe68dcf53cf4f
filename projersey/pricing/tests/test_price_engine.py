from decimal import Decimal

import pytest

from projersey.pricing import compute_breakdown
from projersey.pricing.engine.context import OrderSnapshot, PriceBreakdown
from projersey.pricing.tests.factories import addon, item, roster


def test_subscriber_mid_tier_scenario(engine):
    # base 10000, 20 items, subscriber
    snap = OrderSnapshot(line_items=[item("jersey", 500, 20)], is_subscriber=True)
    pb = engine.compute_breakdown(snap)

    assert pb.base_total == 10000
    assert pb.item_count == 20
    assert pb.tier_discount_rate == Decimal("0.10")
    assert pb.tier_discount_amount == 1000
    assert pb.subscription_discount_applied is True
    assert pb.subscription_discount_amount == 900
    assert pb.subtotal_after_discounts == 8100
    assert pb.shipping_cost == 3000
    assert pb.shipping_free_threshold_applied is False
    assert pb.tax_amount == 777
    assert pb.grand_total == 11877


def test_large_order_free_shipping_scenario(engine):
    # base 25000, 60 items, not a subscriber
    snap = OrderSnapshot(
        line_items=[item("soccer_jersey", 400, 50)],
        add_ons=[addon("matching_socks", 500, 10)],
    )
    pb = engine.compute_breakdown(snap)

    assert pb.base_total == 25000
    assert pb.item_count == 60
    assert pb.tier_discount_amount == 3750
    assert pb.subscription_discount_amount == 0
    assert pb.subtotal_after_discounts == 21250
    assert pb.shipping_cost == 0
    assert pb.shipping_free_threshold_applied is True
    assert pb.tax_amount == 1488
    assert pb.grand_total == 22738


def test_empty_order_is_all_zero(engine, empty_snapshot):
    pb = engine.compute_breakdown(empty_snapshot)

    assert pb == PriceBreakdown.empty()
    assert pb.discount_percentage == Decimal("0")
    assert pb.price_before_tax == 0


def test_subscription_discount_applies_after_tier(engine):
    base = OrderSnapshot(line_items=[item("jersey", 1000, 50)])
    sub = OrderSnapshot(line_items=[item("jersey", 1000, 50)], is_subscriber=True)

    plain = engine.compute_breakdown(base)
    pb = engine.compute_breakdown(sub)

    assert plain.tier_discount_amount == pb.tier_discount_amount == 7500
    # 10% of 42500, not of 50000
    assert pb.subscription_discount_amount == 4250
    assert pb.subtotal_after_discounts == 50000 - 7500 - 4250


def test_team_order_roster_substitution(engine, team_snapshot):
    pb = engine.compute_breakdown(team_snapshot)

    # jersey 8 (not 5, not 13) + shorts 3 + badges 2
    assert pb.item_count == 13
    assert pb.base_total == 8 * 2000 + 3 * 1500 + 2 * 300
    assert pb.tier_discount_rate == Decimal("0.05")


def test_discount_percentage_and_totals(engine):
    snap = OrderSnapshot(line_items=[item("jersey", 500, 20)], is_subscriber=True)
    pb = engine.compute_breakdown(snap)

    assert pb.tier_discount_applied is True
    assert pb.discount_total == 1900
    assert pb.discount_percentage == Decimal("0.1900")
    assert pb.price_before_tax == 11100


def test_free_items_still_ship(engine):
    pb = engine.compute_breakdown(OrderSnapshot(add_ons=[addon("sticker", 0, 1)]))

    assert pb.base_total == 0
    assert pb.item_count == 1
    assert pb.shipping_cost == 3000
    assert pb.discount_percentage == Decimal("0")
    assert pb.grand_total == 3000 + 210


@pytest.mark.parametrize("subscriber", [False, True])
@pytest.mark.parametrize("price", [0, 1, 333, 999, 2000, 4999])
@pytest.mark.parametrize("qty", [1, 9, 10, 19, 20, 49, 50, 51, 120])
def test_grand_total_is_exact_sum(engine, subscriber, price, qty):
    snap = OrderSnapshot(
        line_items=[item("jersey", price, qty)],
        add_ons=[addon("name-printing", 250, qty)],
        is_subscriber=subscriber,
    )
    pb = engine.compute_breakdown(snap)

    assert pb.grand_total == pb.subtotal_after_discounts + pb.shipping_cost + pb.tax_amount
    assert pb.subtotal_after_discounts == pb.base_total - pb.tier_discount_amount - pb.subscription_discount_amount
    for amount in (
        pb.base_total,
        pb.tier_discount_amount,
        pb.subscription_discount_amount,
        pb.subtotal_after_discounts,
        pb.shipping_cost,
        pb.tax_amount,
        pb.grand_total,
    ):
        assert isinstance(amount, int)
        assert amount >= 0


def test_base_total_is_monotonic_in_quantity(engine):
    prev = None
    for qty in range(1, 121):
        pb = engine.compute_breakdown(OrderSnapshot(line_items=[item("jersey", 2000, qty)]))
        if prev is not None:
            assert pb.base_total >= prev.base_total
            assert pb.item_count == prev.item_count + 1
        prev = pb


def test_grand_total_is_monotonic_within_a_tier_and_shipping_band(engine):
    # 1..9 items at 500: no tier discount, base shipping throughout
    totals = [
        engine.compute_breakdown(OrderSnapshot(line_items=[item("jersey", 500, q)])).grand_total
        for q in range(1, 10)
    ]
    assert totals == sorted(totals)


def test_grand_total_can_drop_at_tier_boundary(engine):
    # 19 -> 20 items moves from 5% to 10%: the cheaper cart is the larger one
    pb19 = engine.compute_breakdown(OrderSnapshot(line_items=[item("jersey", 2000, 19)]))
    pb20 = engine.compute_breakdown(OrderSnapshot(line_items=[item("jersey", 2000, 20)]))

    assert pb20.base_total > pb19.base_total
    assert pb20.grand_total < pb19.grand_total


def test_module_level_compute_breakdown_uses_default_rules(engine):
    snap = OrderSnapshot(line_items=[item("jersey", 500, 20)], is_subscriber=True)
    assert compute_breakdown(snap) == engine.compute_breakdown(snap)


def test_custom_rules_change_the_result(rules):
    from dataclasses import replace

    no_tax = replace(rules, tax_rate=Decimal("0"))
    pb = compute_breakdown(OrderSnapshot(line_items=[item("jersey", 500, 20)]), rules=no_tax)

    assert pb.tax_amount == 0
    assert pb.grand_total == pb.subtotal_after_discounts + pb.shipping_cost


def test_snapshot_is_not_mutated(engine, team_snapshot):
    before = repr(team_snapshot)
    engine.compute_breakdown(team_snapshot)
    assert repr(team_snapshot) == before
