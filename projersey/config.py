# projersey/config.py
import os
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # === General ===
    app_env: str = "local"  # local | development | production
    app_name: str = "ProJersey"

    # === Logging ===
    log_level: str = "INFO"

    # === Pricing ===
    currency: str = "usd"
    pricing_rules_path: Optional[str] = Field(
        None, description="YAML rule set; defaults to the built-in constants when unset"
    )

    # === HTTP ===
    allowed_origins: List[str] = ["*"]
    rate_limit_default: str = "120/minute"

    # === Payments ===
    stripe_secret_key: Optional[str] = None
    stripe_api_base: str = "https://api.stripe.com"
    payment_timeout_seconds: float = 30.0
    payment_retry_attempts: int = 3
    payment_min_amount_minor: int = 50  # provider minimum: $0.50

    # === Subscriptions ===
    # Customer ids with an active Pro subscription (JSON list in env, e.g. ["cus_1"])
    subscriber_ids: List[str] = []

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PROJERSEY_",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton Settings with environment profile overrides."""
    s = Settings()

    env = os.getenv("ENVIRONMENT", s.app_env).lower()
    if env == "production":
        s.log_level = "WARNING"
    elif env == "development":
        s.log_level = "DEBUG"

    return s
