"""Domain Events related to remote calls and batch execution.

Events are emitted when calls are deferred by the rate limiter, retried,
fail, succeed, and when a batch chunk completes.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass


@dataclass
class ApiCallInitiated(DomainEvent):
    """Event triggered when a remote call is about to be made."""
    provider: str
    endpoint: str
    attempt_number: int = 1
    timestamp: float = field(default_factory=time.time)


@dataclass
class ApiCallSucceeded(DomainEvent):
    """Event triggered when a remote call succeeds."""
    provider: str
    endpoint: str
    latency_ms: float
    response_summary: Optional[Any] = None # e.g., token usage
    timestamp: float = field(default_factory=time.time)


@dataclass
class ApiCallFailed(DomainEvent):
    """Event triggered when a remote call fails definitively (after retries)."""
    provider: str
    endpoint: str
    error_type: str
    error_message: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class ApiCallDeferred(DomainEvent):
    """Event triggered when a call is held back by the rate limiter."""
    wait_time_seconds: float
    timestamp: float = field(default_factory=time.time)


@dataclass
class RetryScheduled(DomainEvent):
    """Event triggered when a retry is scheduled for a failed call."""
    attempt_number: int
    delay_seconds: float
    error_type: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class BatchCompleted(DomainEvent):
    """Event triggered after every chunk processed by the batch scheduler."""
    batch_number: int
    total_batches: int
    completed: int
    total: int
    timestamp: float = field(default_factory=time.time)


def dispatch_event(event: DomainEvent) -> None:
    """Publishes an event. Events are only logged for now."""
    logger.debug(f"EVENT: {event}")
