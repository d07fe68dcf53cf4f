# projersey/payments/retry.py
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from projersey.core.logging_config import logger


@dataclass(frozen=True)
class RetryPolicy:
    """
    Resend policy for calls to the payment provider.

    Only transport failures (connect, timeout, protocol) are resent. Any HTTP
    answer, 5xx included, is final.
    """

    attempts: int = 3
    base: float = 0.2
    factor: float = 2.0
    cap: float = 2.0
    jitter: float = 0.25
    sleep: Callable[[float], None] = time.sleep

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValueError("attempts must be >= 1")

    def delay(self, retry_no: int) -> float:
        """Seconds to wait before resend number `retry_no` (1-based)."""
        d = min(self.base * (self.factor ** (retry_no - 1)), self.cap)
        return d + random.uniform(0, d * self.jitter)

    def send(
        self,
        request: Callable[[], httpx.Response],
        *,
        operation: str,
        idempotency_key: Optional[str] = None,
    ) -> httpx.Response:
        """Run `request` until it gets an answer; the last TransportError propagates."""
        attempt = 1
        while True:
            try:
                return request()
            except httpx.TransportError as e:
                if attempt >= self.attempts:
                    raise
                wait = self.delay(attempt)
                logger.bind(
                    operation=operation,
                    transaction_id=idempotency_key,
                    attempt=attempt,
                    sleep_s=round(wait, 3),
                    error=repr(e),
                ).warning("payment_request_retry")
                self.sleep(wait)
                attempt += 1
