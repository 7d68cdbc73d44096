"""Service for executing API calls with automatic retries.

Implements exponential backoff for handling transient errors like
rate limits (429) or temporary server issues (5xx). The last error is
re-raised unchanged once the attempt budget is spent.
"""

import logging
import time
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar

from openai import AuthenticationError as OpenAIAuthenticationError
from groq import AuthenticationError as GroqAuthenticationError

from stardust.domain.events.api_events import (
    ApiCallInitiated, ApiCallSucceeded, ApiCallFailed, RetryScheduled, dispatch_event
)
from stardust.domain.models.resilience import RetryPolicy
from stardust.infrastructure.resilience.rate_limiter import RateLimiter, delay

logger = logging.getLogger(__name__)

T = TypeVar("T")

RetryCallback = Callable[[int, int, BaseException], None]

# Errors that will not go away by asking again.
NON_RETRYABLE_EXCEPTIONS: Tuple[Type[BaseException], ...] = (
    OpenAIAuthenticationError,
    GroqAuthenticationError,
    ValueError,
    TypeError,
)


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    non_retryable: Tuple[Type[BaseException], ...] = (),
    on_retry: Optional[RetryCallback] = None,
) -> T:
    """Runs ``operation`` until it succeeds or the policy's attempts run out.

    Args:
        operation: Zero-argument callable returning an awaitable.
        policy: Backoff parameters; defaults to RetryPolicy().
        non_retryable: Exception types raised immediately without retrying.
        on_retry: Called as (failed_attempt, delay_ms, error) before each backoff.

    Returns:
        The result of the first successful attempt.

    Raises:
        The last error raised by ``operation``, unchanged.
    """
    policy = policy or RetryPolicy()
    total_attempts = policy.total_attempts

    for attempt in range(1, total_attempts + 1):
        try:
            return await operation()
        except Exception as e:
            if non_retryable and isinstance(e, non_retryable):
                logger.error(f"Non-retryable error on attempt {attempt}: {type(e).__name__}: {e}")
                raise
            if attempt >= total_attempts:
                logger.error(f"Max retries ({policy.max_retries}) reached. Last error: {type(e).__name__}: {e}")
                raise
            delay_ms = policy.delay_for_retry(attempt)
            logger.warning(
                f"Attempt {attempt}/{total_attempts} failed: {type(e).__name__}: {e}. "
                f"Retrying in {delay_ms}ms..."
            )
            dispatch_event(RetryScheduled(
                attempt_number=attempt, delay_seconds=delay_ms / 1000, error_type=type(e).__name__
            ))
            if on_retry:
                on_retry(attempt, delay_ms, e)
            await delay(delay_ms)

    raise RuntimeError("retry_with_backoff exhausted without result")


class ApiRetryService:
    """Handles remote call execution with rate limiting and retries."""

    def __init__(
        self,
        rate_limiter: RateLimiter,
        policy: Optional[RetryPolicy] = None,
        provider_name: str = "openai",
        non_retryable: Tuple[Type[BaseException], ...] = NON_RETRYABLE_EXCEPTIONS,
    ):
        """Initializes the ApiRetryService.

        Args:
            rate_limiter: The rate limiter every attempt passes through.
            policy: Retry/backoff configuration.
            provider_name: Name of the provider (for logging/events).
            non_retryable: Exception types that fail immediately.
        """
        self.rate_limiter = rate_limiter
        self.policy = policy or RetryPolicy()
        self.provider_name = provider_name
        self.non_retryable = non_retryable

        logger.info(
            f"ApiRetryService initialized: max_retries={self.policy.max_retries}, "
            f"initial_delay={self.policy.initial_delay_ms}ms, max_delay={self.policy.max_delay_ms}ms, "
            f"provider='{self.provider_name}'"
        )

    async def execute_with_retry(
        self,
        func: Callable[..., Awaitable[T]],
        *args: Any,
        endpoint_name: Optional[str] = None,
        **kwargs: Any,
    ) -> T:
        """Executes an async function with rate limiting and retries.

        Each attempt is throttled separately, so retries also respect the
        provider's rate ceiling.

        Raises:
            The last error once retries are exhausted, or a non-retryable
            error immediately.
        """
        endpoint = endpoint_name or getattr(func, "__name__", "call")
        attempt_counter = 0

        async def attempt() -> T:
            nonlocal attempt_counter
            attempt_counter += 1
            dispatch_event(ApiCallInitiated(
                provider=self.provider_name, endpoint=endpoint, attempt_number=attempt_counter
            ))
            start_time = time.perf_counter()
            result = await func(*args, **kwargs)
            latency_ms = (time.perf_counter() - start_time) * 1000
            dispatch_event(ApiCallSucceeded(
                provider=self.provider_name,
                endpoint=endpoint,
                latency_ms=latency_ms,
                response_summary=getattr(result, "token_usage", None),
            ))
            return result

        try:
            return await retry_with_backoff(
                lambda: self.rate_limiter.throttle(attempt),
                self.policy,
                non_retryable=self.non_retryable,
            )
        except Exception as e:
            logger.error(f"Call to {self.provider_name}.{endpoint} failed after {attempt_counter} attempt(s): {e}")
            dispatch_event(ApiCallFailed(
                provider=self.provider_name, endpoint=endpoint,
                error_type=type(e).__name__, error_message=str(e),
            ))
            raise
