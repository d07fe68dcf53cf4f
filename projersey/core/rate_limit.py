# projersey/core/rate_limit.py
from slowapi import Limiter
from slowapi.util import get_remote_address

from projersey.config import get_settings

# One shared Limiter for the whole app; default limits apply to every route
limiter = Limiter(
    key_func=lambda request: f"{get_remote_address(request)}:{request.headers.get('x-customer-id', 'anon')}",
    default_limits=[get_settings().rate_limit_default],
)
