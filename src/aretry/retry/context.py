r"""Value types describing a retry attempt and the terminal outcome.

This module provides ``RetryContext``, the snapshot passed to lifecycle
hooks, and ``RetryResult``, the outcome returned to the caller of the
retry engine.
"""

from __future__ import annotations

__all__ = ["RetryContext", "RetryOutcome", "RetryResult"]

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from datetime import datetime

    from aretry.exceptions import RetryFailedError

T = TypeVar("T")


class RetryOutcome(Enum):
    """Terminal states of a retry call.

    Attributes:
        SUCCEEDED: An attempt returned a value.
        FAILED_EXHAUSTED: Attempts ran out, or the retry predicate
            rejected the error.
        FAILED_CANCELLED_OR_TIMED_OUT: The effective cancellation token
            fired.
    """

    SUCCEEDED = "succeeded"
    FAILED_EXHAUSTED = "failed_exhausted"
    FAILED_CANCELLED_OR_TIMED_OUT = "failed_cancelled_or_timed_out"


@dataclass(frozen=True)
class RetryContext:
    """Information passed to the on_retry, on_success and on_failure
    hooks.

    Attributes:
        attempt: The attempt that just completed (1-indexed).
        last_exception: The exception raised by that attempt, or None
            on a success context.
        delay: The delay in seconds that will be waited before the next
            attempt. 0.0 on success and failure contexts.
        start_time: When the whole retry call started (UTC).
    """

    attempt: int
    last_exception: Exception | None
    delay: float
    start_time: datetime


@dataclass(frozen=True)
class RetryResult(Generic[T]):
    """Terminal outcome of a retry call.

    Attributes:
        succeeded: Whether an attempt succeeded.
        value: The value returned by the operation. Only meaningful if
            ``succeeded`` is True, None otherwise.
        attempts: The number of operation invocations made.
        elapsed_time: Total wall-clock time of the call in seconds,
            including delays.
        last_attempt_duration: Duration of the last operation invocation
            in seconds.
        error: The terminal error if the call failed, None otherwise.
        outcome: The terminal state.

    Example:
        ```pycon
        >>> from aretry.retry.context import RetryOutcome, RetryResult
        >>> result = RetryResult(
        ...     succeeded=True,
        ...     value=42,
        ...     attempts=1,
        ...     elapsed_time=0.01,
        ...     last_attempt_duration=0.01,
        ... )
        >>> result.unwrap()
        42

        ```
    """

    succeeded: bool
    value: T | None
    attempts: int
    elapsed_time: float
    last_attempt_duration: float
    error: RetryFailedError | None = None
    outcome: RetryOutcome = RetryOutcome.SUCCEEDED

    def unwrap(self) -> T:
        """Return the value of a successful result.

        Returns:
            The value returned by the operation.

        Raises:
            RetryFailedError: The terminal error if the call failed.
        """
        if not self.succeeded:
            raise self.error
        return self.value
