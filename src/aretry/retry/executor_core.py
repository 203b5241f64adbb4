r"""Shared core logic for retry executors.

This module provides shared helper functions used by both synchronous
and asynchronous retry executors. These functions build the terminal
``RetryResult`` of each termination path and log it.
"""

from __future__ import annotations

__all__ = [
    "PLACEHOLDER_RESULT",
    "create_cancelled_result",
    "create_exhausted_result",
    "create_success_result",
]

import logging
from typing import TYPE_CHECKING, TypeVar

from aretry.cancellation import CancellationReason
from aretry.exceptions import RetryCancelledError, RetryFailedError
from aretry.retry.context import RetryOutcome, RetryResult
from aretry.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from aretry.cancellation import CancellationToken

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)

# Value produced by zero-result operations adapted to the generic engine
PLACEHOLDER_RESULT = True


def create_success_result(
    value: T, attempts: int, elapsed_time: float, last_attempt_duration: float
) -> RetryResult[T]:
    """Create the result of a successful call.

    Args:
        value: The value returned by the operation.
        attempts: Number of attempts made.
        elapsed_time: Total elapsed time in seconds.
        last_attempt_duration: Duration of the successful attempt.

    Returns:
        The successful result.
    """
    log_structured(
        logger,
        logging.DEBUG,
        f"Operation succeeded after {attempts} attempt(s)",
        attempts=attempts,
        elapsed_time=elapsed_time,
        outcome=RetryOutcome.SUCCEEDED.value,
    )
    return RetryResult(
        succeeded=True,
        value=value,
        attempts=attempts,
        elapsed_time=elapsed_time,
        last_attempt_duration=last_attempt_duration,
        outcome=RetryOutcome.SUCCEEDED,
    )


def create_exhausted_result(
    error: Exception, attempts: int, elapsed_time: float, last_attempt_duration: float
) -> RetryResult:
    """Create the result of a call that ran out of attempts or whose
    error was not retryable.

    Args:
        error: The error raised by the last attempt.
        attempts: Number of attempts made.
        elapsed_time: Total elapsed time in seconds.
        last_attempt_duration: Duration of the last attempt.

    Returns:
        The failed result, wrapping ``error`` in a RetryFailedError.
    """
    failure = RetryFailedError(
        f"Operation failed after {attempts} attempt(s). See the cause for details.",
        attempts=attempts,
        elapsed_time=elapsed_time,
        cause=error,
    )
    log_structured(
        logger,
        logging.INFO,
        f"{failure.message} Last error: {type(error).__name__}: {error}",
        attempts=attempts,
        elapsed_time=elapsed_time,
        outcome=RetryOutcome.FAILED_EXHAUSTED.value,
    )
    return RetryResult(
        succeeded=False,
        value=None,
        attempts=attempts,
        elapsed_time=elapsed_time,
        last_attempt_duration=last_attempt_duration,
        error=failure,
        outcome=RetryOutcome.FAILED_EXHAUSTED,
    )


def create_cancelled_result(
    token: CancellationToken,
    attempts: int,
    elapsed_time: float,
    last_attempt_duration: float,
    total_timeout: float | None,
    cause: BaseException | None = None,
) -> RetryResult:
    """Create the result of a call ended by the effective cancellation
    token.

    Args:
        token: The effective cancellation token, already fired.
        attempts: Number of attempts made.
        elapsed_time: Total elapsed time in seconds.
        last_attempt_duration: Duration of the last attempt.
        total_timeout: The configured total timeout, used in the message.
        cause: The last exception raised by the operation, if any.

    Returns:
        The failed result, with a RetryCancelledError.
    """
    reason = token.reason or CancellationReason.CANCELLED
    if reason is CancellationReason.TIMEOUT:
        budget = f"total timeout of {total_timeout}s" if total_timeout is not None else "deadline"
        message = f"Operation timed out after {attempts} attempt(s) ({budget} exceeded)."
    else:
        message = f"Operation cancelled after {attempts} attempt(s)."

    failure = RetryCancelledError(
        message,
        attempts=attempts,
        elapsed_time=elapsed_time,
        reason=reason,
        cause=cause,
    )
    log_structured(
        logger,
        logging.INFO,
        message,
        attempts=attempts,
        elapsed_time=elapsed_time,
        outcome=RetryOutcome.FAILED_CANCELLED_OR_TIMED_OUT.value,
        reason=reason.value,
    )
    return RetryResult(
        succeeded=False,
        value=None,
        attempts=attempts,
        elapsed_time=elapsed_time,
        last_attempt_duration=last_attempt_duration,
        error=failure,
        outcome=RetryOutcome.FAILED_CANCELLED_OR_TIMED_OUT,
    )
