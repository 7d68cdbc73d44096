"""Bounded-concurrency execution of an async worker over a sequence.

At most ``limit`` worker calls are in flight at any time. Each finished call
immediately admits the next queued item, and the results come back in input
order regardless of completion order.

Failure policy is fail-fast: the first worker error cancels the calls still
in flight, stops admission and is raised to the caller. Results that had
already completed are discarded.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def run_with_concurrency(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    limit: int,
) -> List[R]:
    """Runs ``worker`` over ``items`` with at most ``limit`` calls in flight.

    Args:
        items: Work items; result[i] corresponds to items[i].
        worker: Async callable applied to each item.
        limit: Maximum number of simultaneous worker calls (>= 1).

    Returns:
        Worker results in input order.

    Raises:
        ValueError: If ``limit`` is below 1.
        Exception: The first error raised by any worker call.
    """
    if limit < 1:
        raise ValueError(f"Concurrency limit must be >= 1, got {limit}")

    pending = list(items)
    if not pending:
        return []

    results: List[R] = [None] * len(pending)  # type: ignore[list-item]
    next_index = 0

    async def lane() -> None:
        nonlocal next_index
        while next_index < len(pending):
            index = next_index
            next_index += 1
            results[index] = await worker(pending[index])

    lane_count = min(limit, len(pending))
    logger.debug(f"Running {len(pending)} item(s) with concurrency limit {limit} ({lane_count} lanes)")
    lanes = [asyncio.ensure_future(lane()) for _ in range(lane_count)]

    try:
        await asyncio.gather(*lanes)
    except BaseException:
        for task in lanes:
            task.cancel()
        await asyncio.gather(*lanes, return_exceptions=True)
        raise

    return results
