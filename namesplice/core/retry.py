# File: namesplice/core/retry.py

import logging
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

from namesplice.core.errors import NamespliceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded exponential backoff.
    Delay before retry n (1-based) is min(max_delay, initial_delay * backoff_factor ** (n - 1)).
    """
    max_attempts: int = 3
    initial_delay: float = 1.0
    backoff_factor: float = 2.0
    max_delay: float = 30.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ValueError("Retry delays cannot be negative.")

    def delay_for(self, retry_number: int) -> float:
        return min(self.max_delay, self.initial_delay * (self.backoff_factor ** (retry_number - 1)))


def is_retryable_error(error: Exception) -> bool:
    """Default classifier: only errors flagged as retryable by the taxonomy."""
    return isinstance(error, NamespliceError) and error.retryable


def call_with_retry(
    operation: Callable[[], T],
    policy: RetryPolicy = RetryPolicy(),
    is_retryable: Callable[[Exception], bool] = is_retryable_error,
    sleep: Callable[[float], None] = time.sleep,
    label: str = "operation",
) -> T:
    """
    Runs an idempotent operation, retrying retryable failures with backoff.

    Args:
        operation: Zero-argument callable. Must be safe to call more than once.
        policy: Attempt count and backoff curve.
        is_retryable: Decides whether a raised exception deserves another attempt.
        sleep: Injected for tests.
        label: Used in log lines only.

    Returns:
        Whatever the operation returns on its first successful attempt.

    Raises:
        The last exception raised by the operation once attempts are exhausted,
        or the first non-retryable exception.
    """
    attempt = 1
    while True:
        try:
            return operation()
        except Exception as e:
            if not is_retryable(e):
                raise
            if attempt >= policy.max_attempts:
                logger.error(f"{label} failed after {attempt} attempts: {e}")
                raise

            delay = policy.delay_for(attempt)
            logger.warning(
                f"Retrying {label} in {delay:.2f}s ({attempt}/{policy.max_attempts - 1}) after: {e}"
            )
            sleep(delay)
            attempt += 1
