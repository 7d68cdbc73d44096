"""Value Objects configuring the resilience primitives.

Plain value structs with no I/O: retry backoff parameters and batch pacing
options.
"""

from dataclasses import dataclass
from typing import Callable, Optional

DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_DELAY_MS = 1000
DEFAULT_MAX_DELAY_MS = 10000

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff configuration.

    Total attempts are ``max_retries + 1``. The k-th retry (1-based) waits
    ``min(initial_delay_ms * 2**(k-1), max_delay_ms)``.
    """
    max_retries: int = DEFAULT_MAX_RETRIES
    initial_delay_ms: int = DEFAULT_INITIAL_DELAY_MS
    max_delay_ms: int = DEFAULT_MAX_DELAY_MS

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.initial_delay_ms <= 0:
            raise ValueError(f"initial_delay_ms must be > 0, got {self.initial_delay_ms}")
        if self.max_delay_ms < self.initial_delay_ms:
            raise ValueError(
                f"max_delay_ms ({self.max_delay_ms}) must be >= initial_delay_ms ({self.initial_delay_ms})"
            )

    @property
    def total_attempts(self) -> int:
        return self.max_retries + 1

    def delay_for_retry(self, retry_number: int) -> int:
        """Backoff in milliseconds before the given retry (1-based)."""
        if retry_number < 1:
            raise ValueError(f"retry_number must be >= 1, got {retry_number}")
        return min(self.initial_delay_ms * (2 ** (retry_number - 1)), self.max_delay_ms)


@dataclass(frozen=True)
class BatchOptions:
    """Chunking and pacing options for batch processing.

    Attributes:
        batch_size: Items per chunk.
        batch_delay_ms: Pause between chunks (never after the last one).
        on_progress: Called with (completed, total) after every chunk.
        concurrency: In-flight limit inside a chunk. None admits the whole
            chunk at once, 1 runs it sequentially.
    """
    batch_size: int
    batch_delay_ms: int = 0
    on_progress: Optional[ProgressCallback] = None
    concurrency: Optional[int] = None

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be > 0, got {self.batch_size}")
        if self.batch_delay_ms < 0:
            raise ValueError(f"batch_delay_ms must be >= 0, got {self.batch_delay_ms}")
        if self.concurrency is not None and self.concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {self.concurrency}")
