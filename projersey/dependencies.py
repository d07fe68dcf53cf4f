from __future__ import annotations

from functools import lru_cache

from projersey.config import get_settings
from projersey.payments.gateway import PaymentGateway, StripeGateway, UnconfiguredGateway
from projersey.payments.retry import RetryPolicy
from projersey.pricing.engine.price_engine import PriceEngine
from projersey.shipping.service import ShippingService
from projersey.subscriptions.service import SubscriptionDirectory


@lru_cache(maxsize=1)
def get_price_engine() -> PriceEngine:
    """Engine with the configured rule set (built-in constants when unset)."""
    path = get_settings().pricing_rules_path
    if path:
        return PriceEngine.from_yaml_file(path)
    return PriceEngine()


def get_shipping_service() -> ShippingService:
    return ShippingService(get_price_engine().rules)


@lru_cache(maxsize=1)
def get_subscription_directory() -> SubscriptionDirectory:
    return SubscriptionDirectory.from_ids(get_settings().subscriber_ids)


@lru_cache(maxsize=1)
def get_payment_gateway() -> PaymentGateway:
    s = get_settings()
    if not s.stripe_secret_key:
        return UnconfiguredGateway()
    return StripeGateway(
        s.stripe_secret_key,
        api_base=s.stripe_api_base,
        timeout=s.payment_timeout_seconds,
        retry=RetryPolicy(attempts=s.payment_retry_attempts),
    )
