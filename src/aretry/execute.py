r"""Synchronous entry points of the retry engine.

This module provides ``execute``, which returns a ``RetryResult``, and
``run``, its zero-result form, which raises the terminal error instead.
"""

from __future__ import annotations

__all__ = ["execute", "run"]

from typing import TYPE_CHECKING, TypeVar

from aretry.backoff.strategy import DelayStrategy
from aretry.retry.config import DEFAULT_MAX_ATTEMPTS, CallbackConfig, RetryConfig
from aretry.retry.executor import RetryExecutor
from aretry.retry.executor_core import PLACEHOLDER_RESULT

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.backoff.strategy import BackoffStrategy
    from aretry.callbacks import Hook
    from aretry.cancellation import CancellationToken
    from aretry.retry.context import RetryResult

T = TypeVar("T")


def execute(
    operation: Callable[[CancellationToken], T],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay: float | None = None,
    strategy: BackoffStrategy = DelayStrategy.FIXED,
    should_retry: Callable[[Exception], bool] | None = None,
    on_retry: Hook | None = None,
    on_success: Hook | None = None,
    on_failure: Hook | None = None,
    total_timeout: float | None = None,
    cancellation_token: CancellationToken | None = None,
) -> RetryResult[T]:
    """Run a blocking operation until it succeeds or the retry sequence
    ends.

    Args:
        operation: The function to run. It receives the effective
            cancellation token.
        max_attempts: Maximum number of attempts, including the first.
            Values lower than 1 are treated as 1.
        base_delay: Base delay in seconds. None or negative values are
            treated as 0.2.
        strategy: Built-in ``DelayStrategy`` or a custom backoff
            strategy instance.
        should_retry: Optional predicate deciding whether an error is
            retried. If None, every error is retried.
        on_retry: Optional hook invoked after each failed attempt that
            will be retried.
        on_success: Optional hook invoked when an attempt succeeds.
        on_failure: Optional hook invoked when attempts run out or the
            error is not retryable.
        total_timeout: Optional total time budget in seconds.
        cancellation_token: Optional external cancellation token.

    Returns:
        The terminal result. Branch on ``result.succeeded``; on failure
        ``result.error`` describes the attempt count, elapsed time and
        original cause.

    Example:
        ```pycon
        >>> from aretry import execute
        >>> calls = []
        >>> def flaky(token):
        ...     calls.append(1)
        ...     if len(calls) < 3:
        ...         raise ConnectionError("connection reset")
        ...     return 42
        ...
        >>> result = execute(flaky, max_attempts=5, base_delay=0.0)
        >>> result.succeeded, result.value, result.attempts
        (True, 42, 3)

        ```
    """
    executor = RetryExecutor(
        RetryConfig(
            max_attempts=max_attempts,
            base_delay=base_delay,
            strategy=strategy,
            should_retry=should_retry,
            total_timeout=total_timeout,
        ),
        CallbackConfig(on_retry=on_retry, on_success=on_success, on_failure=on_failure),
    )
    return executor.execute(operation, cancellation_token=cancellation_token)


def run(
    operation: Callable[[CancellationToken], object],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay: float | None = None,
    strategy: BackoffStrategy = DelayStrategy.FIXED,
    should_retry: Callable[[Exception], bool] | None = None,
    on_retry: Hook | None = None,
    on_success: Hook | None = None,
    on_failure: Hook | None = None,
    total_timeout: float | None = None,
    cancellation_token: CancellationToken | None = None,
) -> None:
    """Run a blocking operation that produces no result, with retries.

    Takes the same parameters as ``execute``. The operation's return
    value is discarded.

    Raises:
        RetryFailedError: If the retry sequence fails. A
            ``RetryCancelledError`` is raised if it was cancelled or
            timed out.

    Example:
        ```pycon
        >>> from aretry import run
        >>> run(lambda token: None)
        >>> def broken(token):
        ...     raise OSError("disk full")
        ...
        >>> run(broken, max_attempts=2, base_delay=0.0)
        Traceback (most recent call last):
            ...
        aretry.exceptions.RetryFailedError: Operation failed after 2 attempt(s). See the cause for details.

        ```
    """

    def operation_with_placeholder(token: CancellationToken) -> bool:
        operation(token)
        return PLACEHOLDER_RESULT

    execute(
        operation_with_placeholder,
        max_attempts=max_attempts,
        base_delay=base_delay,
        strategy=strategy,
        should_retry=should_retry,
        on_retry=on_retry,
        on_success=on_success,
        on_failure=on_failure,
        total_timeout=total_timeout,
        cancellation_token=cancellation_token,
    ).unwrap()
