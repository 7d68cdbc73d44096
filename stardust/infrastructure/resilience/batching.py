"""Paced batch processing.

Splits a sequence into fixed-size chunks, runs each chunk through the
bounded-concurrency runner, pauses between chunks, and reports cumulative
progress after every chunk.
"""

import logging
import math
from typing import Awaitable, Callable, List, Sequence, Tuple, TypeVar

from stardust.domain.events.api_events import BatchCompleted, dispatch_event
from stardust.domain.models.resilience import BatchOptions
from stardust.infrastructure.resilience.concurrency import run_with_concurrency
from stardust.infrastructure.resilience.rate_limiter import delay

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def process_batch(
    items: Sequence[T],
    processor: Callable[[T, int], Awaitable[R]],
    options: BatchOptions,
) -> List[R]:
    """Processes ``items`` chunk by chunk.

    ``processor`` receives each item with its index in the original sequence.
    Exactly ``ceil(n / batch_size) - 1`` pauses of ``batch_delay_ms`` are
    inserted, one between each pair of consecutive chunks.

    Returns:
        Processor results in input order.
    """
    pending = list(items)
    total = len(pending)
    total_batches = math.ceil(total / options.batch_size)
    results: List[R] = []

    async def run_indexed(pair: Tuple[int, T]) -> R:
        index, item = pair
        return await processor(item, index)

    for batch_number, start in enumerate(range(0, total, options.batch_size), start=1):
        chunk = list(enumerate(pending[start:start + options.batch_size], start=start))
        limit = options.concurrency or len(chunk)
        logger.debug(f"Batch {batch_number}/{total_batches}: items {start + 1}-{start + len(chunk)}")

        results.extend(await run_with_concurrency(chunk, run_indexed, limit))

        completed = start + len(chunk)
        dispatch_event(BatchCompleted(
            batch_number=batch_number, total_batches=total_batches, completed=completed, total=total
        ))
        if options.on_progress:
            options.on_progress(completed, total)

        if completed < total and options.batch_delay_ms > 0:
            await delay(options.batch_delay_ms)

    return results
