from __future__ import annotations

import pytest

from projersey.pricing.engine.context import OrderSnapshot
from projersey.pricing.engine.price_engine import PriceEngine
from projersey.pricing.engine.rules import PricingRules
from projersey.pricing.tests.factories import addon, item, roster


@pytest.fixture
def rules():
    return PricingRules()


@pytest.fixture
def engine(rules):
    return PriceEngine(rules)


@pytest.fixture
def empty_snapshot():
    return OrderSnapshot()


@pytest.fixture
def team_snapshot():
    # one jersey line at qty 5, roster of 8, plus shorts and a badge add-on
    return OrderSnapshot(
        line_items=[item("soccer_jersey", 2000, 5), item("soccer_shorts", 1500, 3)],
        add_ons=[addon("team-badge", 300, 2)],
        is_team_order=True,
        roster=roster(8),
    )
