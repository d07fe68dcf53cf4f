from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from projersey.dependencies import get_subscription_directory

from .service import SubscriptionDirectory

router = APIRouter(prefix="/api/subscription", tags=["subscription"])


class SubscriptionStatusV1(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_subscribed: bool
    subscription_tier: str
    subscription_expiry: Optional[str] = None
    subscription_status: str


@router.get("/status", response_model=SubscriptionStatusV1)
def subscription_status(
    x_customer_id: Optional[str] = Header(None, alias="X-Customer-ID"),
    directory: SubscriptionDirectory = Depends(get_subscription_directory),
) -> SubscriptionStatusV1:
    st = directory.get_status(x_customer_id)
    return SubscriptionStatusV1(
        is_subscribed=st.is_subscribed,
        subscription_tier=st.tier,
        subscription_expiry=st.expiry.isoformat() if st.expiry else None,
        subscription_status=st.status,
    )
