from decimal import Decimal

from projersey.pricing.calculators.subscription_discount import calc_subscription_discount


def test_subscriber_gets_ten_percent_of_remaining():
    applied, amount, meta = calc_subscription_discount(9000, True, Decimal("0.10"))

    assert applied is True
    assert amount == 900
    assert meta["base"] == 9000


def test_non_subscriber_gets_nothing():
    applied, amount, _ = calc_subscription_discount(9000, False, Decimal("0.10"))
    assert (applied, amount) == (False, 0)


def test_zero_rate_is_not_applied():
    applied, amount, meta = calc_subscription_discount(9000, True, Decimal("0"))

    assert (applied, amount) == (False, 0)
    assert meta["reason"] == "rate<=0"


def test_rounds_half_up():
    # 10% of 1005 = 100.5 -> 101
    _, amount, _ = calc_subscription_discount(1005, True, Decimal("0.10"))
    assert amount == 101
