r"""Asynchronous entry points of the retry engine."""

from __future__ import annotations

__all__ = ["execute_async", "run_async"]

from typing import TYPE_CHECKING, TypeVar

from aretry.backoff.strategy import DelayStrategy
from aretry.retry.config import DEFAULT_MAX_ATTEMPTS, CallbackConfig, RetryConfig
from aretry.retry.executor_async import AsyncRetryExecutor
from aretry.retry.executor_core import PLACEHOLDER_RESULT

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from aretry.backoff.strategy import BackoffStrategy
    from aretry.callbacks import Hook
    from aretry.cancellation import CancellationToken
    from aretry.retry.context import RetryResult

T = TypeVar("T")


async def execute_async(
    operation: Callable[[CancellationToken], Awaitable[T]],
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
    """Run a coroutine function until it succeeds or the retry sequence
    ends.

    This is the asynchronous version of ``execute``. In-flight attempts
    and delays are interrupted as soon as the cancellation token fires
    or the total timeout expires. Hooks may be coroutine functions.

    Args:
        operation: The coroutine function to run. It receives the
            effective cancellation token.
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
        The terminal result.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aretry import execute_async
        >>> async def fetch(token):
        ...     return {"status": "ok"}
        ...
        >>> result = asyncio.run(execute_async(fetch, total_timeout=5.0))
        >>> result.value
        {'status': 'ok'}

        ```
    """
    executor = AsyncRetryExecutor(
        RetryConfig(
            max_attempts=max_attempts,
            base_delay=base_delay,
            strategy=strategy,
            should_retry=should_retry,
            total_timeout=total_timeout,
        ),
        CallbackConfig(on_retry=on_retry, on_success=on_success, on_failure=on_failure),
    )
    return await executor.execute(operation, cancellation_token=cancellation_token)


async def run_async(
    operation: Callable[[CancellationToken], Awaitable[object]],
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
    """Run a coroutine function that produces no result, with retries.

    This is the asynchronous version of ``run``.

    Raises:
        RetryFailedError: If the retry sequence fails. A
            ``RetryCancelledError`` is raised if it was cancelled or
            timed out.
    """

    async def operation_with_placeholder(token: CancellationToken) -> bool:
        await operation(token)
        return PLACEHOLDER_RESULT

    result = await execute_async(
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
    )
    result.unwrap()
