from .engine.context import (  # noqa: F401
    AddOn,
    Gender,
    LineItem,
    OrderSnapshot,
    PriceBreakdown,
    RosterMember,
    Size,
)
from .engine.price_engine import PriceEngine, compute_breakdown  # noqa: F401
from .engine.rules import DEFAULT_RULES, PricingRules  # noqa: F401
from .errors import InvalidInput  # noqa: F401
