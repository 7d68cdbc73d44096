import asyncio
import time

import pytest

from stardust.infrastructure.resilience.rate_limiter import RateLimiter, delay


def test_back_to_back_calls_are_spaced_by_interval():
    """Two immediate throttle calls start at least min_interval_ms apart."""
    limiter = RateLimiter(min_interval_ms=50)
    starts = []

    async def record():
        starts.append(time.monotonic())

    async def scenario():
        await limiter.throttle(record)
        await limiter.throttle(record)

    asyncio.run(scenario())

    assert len(starts) == 2
    assert (starts[1] - starts[0]) * 1000 >= 49


def test_no_extra_wait_after_natural_gap():
    limiter = RateLimiter(min_interval_ms=30)

    async def noop():
        return None

    async def scenario():
        await limiter.throttle(noop)
        await asyncio.sleep(0.05)
        assert limiter.wait_time() == 0.0
        started = time.monotonic()
        await limiter.throttle(noop)
        return time.monotonic() - started

    elapsed = asyncio.run(scenario())
    assert elapsed < 0.025


def test_first_call_is_not_delayed():
    limiter = RateLimiter(min_interval_ms=10_000)
    assert limiter.last_invocation_at is None
    assert limiter.wait_time() == 0.0

    async def value():
        return 42

    started = time.monotonic()
    assert asyncio.run(limiter.throttle(value)) == 42
    assert time.monotonic() - started < 1
    assert limiter.last_invocation_at is not None


def test_concurrent_callers_are_serialized():
    """Callers racing for the limiter still start one interval apart."""
    limiter = RateLimiter(min_interval_ms=40)
    starts = []

    async def record():
        starts.append(time.monotonic())

    async def scenario():
        await asyncio.gather(*(limiter.throttle(record) for _ in range(3)))

    asyncio.run(scenario())

    gaps = [(b - a) * 1000 for a, b in zip(starts, starts[1:])]
    assert all(gap >= 39 for gap in gaps)


def test_operation_error_passes_through():
    limiter = RateLimiter(min_interval_ms=0)

    async def boom():
        raise ConnectionError("network down")

    with pytest.raises(ConnectionError, match="network down"):
        asyncio.run(limiter.throttle(boom))
    # The failed invocation still counts
    assert limiter.last_invocation_at is not None


def test_from_requests_per_minute():
    assert RateLimiter.from_requests_per_minute(15).min_interval_ms == 4000
    assert RateLimiter.from_requests_per_minute(7).min_interval_ms == 8572
    with pytest.raises(ValueError):
        RateLimiter.from_requests_per_minute(0)


def test_negative_interval_rejected():
    with pytest.raises(ValueError):
        RateLimiter(min_interval_ms=-1)


def test_delay_suspends_for_milliseconds():
    started = time.monotonic()
    asyncio.run(delay(20))
    assert time.monotonic() - started >= 0.019
