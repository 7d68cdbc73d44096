"""Implementation of a rate limiter.

Controls the frequency of outgoing requests by enforcing a minimum interval
between successive invocations of a throttled operation.
"""

import asyncio
import logging
import math
import time
from typing import Awaitable, Callable, Optional, TypeVar

from stardust.domain.events.api_events import ApiCallDeferred, dispatch_event

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def delay(ms: float) -> None:
    """Suspends the caller for ``ms`` milliseconds."""
    if ms > 0:
        await asyncio.sleep(ms / 1000)


class RateLimiter:
    """Minimum-interval rate limiter."""

    def __init__(self, min_interval_ms: int):
        """Initializes the rate limiter.

        Args:
            min_interval_ms: Minimum spacing between invocation starts.
        """
        if min_interval_ms < 0:
            raise ValueError(f"min_interval_ms must be >= 0, got {min_interval_ms}")
        self.min_interval_ms = min_interval_ms
        self._last_invocation_at: Optional[float] = None
        self._lock = asyncio.Lock()
        logger.info(f"RateLimiter initialized: min interval {min_interval_ms}ms")

    @classmethod
    def from_requests_per_minute(cls, requests_per_minute: int) -> "RateLimiter":
        """Builds a limiter that spaces calls evenly across a minute."""
        if requests_per_minute <= 0:
            raise ValueError(f"requests_per_minute must be > 0, got {requests_per_minute}")
        return cls(math.ceil(60_000 / requests_per_minute))

    @property
    def last_invocation_at(self) -> Optional[float]:
        return self._last_invocation_at

    def wait_time(self) -> float:
        """Seconds a caller would have to wait before invoking right now.

        Returns 0 if an invocation can be made immediately.
        """
        if self._last_invocation_at is None:
            return 0.0
        elapsed_ms = (time.monotonic() - self._last_invocation_at) * 1000
        if elapsed_ms >= self.min_interval_ms:
            return 0.0
        return (self.min_interval_ms - elapsed_ms) / 1000

    async def throttle(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Waits for the interval to pass, records the invocation, then runs ``operation``.

        The operation's result or error is passed through unchanged.
        """
        async with self._lock:
            wait_seconds = self.wait_time()
            if wait_seconds > 0:
                logger.debug(f"Rate limit reached. Waiting for {wait_seconds:.3f} seconds.")
                dispatch_event(ApiCallDeferred(wait_time_seconds=wait_seconds))
                await asyncio.sleep(wait_seconds)
            self._last_invocation_at = time.monotonic()
        return await operation()
