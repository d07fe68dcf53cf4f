from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Optional

TIER_PRO = "pro"
TIER_FREE = "free"
STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"


@dataclass(frozen=True)
class SubscriptionStatus:
    is_subscribed: bool
    tier: str
    expiry: Optional[datetime]
    status: str

    @classmethod
    def inactive(cls) -> "SubscriptionStatus":
        return cls(is_subscribed=False, tier=TIER_FREE, expiry=None, status=STATUS_INACTIVE)

    @classmethod
    def active(cls, expiry: Optional[datetime] = None) -> "SubscriptionStatus":
        return cls(is_subscribed=True, tier=TIER_PRO, expiry=expiry, status=STATUS_ACTIVE)


class SubscriptionDirectory:
    """
    Subscription lookup for the server side of checkout.

    Only `is_subscribed` feeds pricing; the rest is informational. Unknown and
    anonymous customers are not subscribed.
    """

    def __init__(self, statuses: Optional[Dict[str, SubscriptionStatus]] = None):
        self._statuses: Dict[str, SubscriptionStatus] = dict(statuses or {})

    @classmethod
    def from_ids(cls, subscriber_ids: Iterable[str]) -> "SubscriptionDirectory":
        ids = [str(i).strip() for i in subscriber_ids if str(i).strip()]
        return cls({i: SubscriptionStatus.active() for i in ids})

    def get_status(self, customer_id: Optional[str]) -> SubscriptionStatus:
        key = (customer_id or "").strip()
        if not key:
            return SubscriptionStatus.inactive()
        return self._statuses.get(key, SubscriptionStatus.inactive())

    def is_subscribed(self, customer_id: Optional[str]) -> bool:
        return self.get_status(customer_id).is_subscribed
