"""API Resilience Implementations.

Contains services for handling API rate limits, retries with exponential
backoff, bounded concurrency and paced batch execution.
Bounded Context: API Resilience
"""

from stardust.infrastructure.resilience.rate_limiter import RateLimiter, delay
from stardust.infrastructure.resilience.api_retry import ApiRetryService, retry_with_backoff
from stardust.infrastructure.resilience.concurrency import run_with_concurrency
from stardust.infrastructure.resilience.batching import process_batch

__all__ = [
    'RateLimiter',
    'delay',
    'ApiRetryService',
    'retry_with_backoff',
    'run_with_concurrency',
    'process_batch',
]
