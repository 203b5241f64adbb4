r"""Asynchronous retry executor.

This module provides the AsyncRetryExecutor class that runs a coroutine
function with automatic retry logic, interrupting in-flight attempts and
delays as soon as the effective cancellation token fires.
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor"]

import asyncio
import inspect
import logging
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, TypeVar

from aretry.cancellation import compose_cancellation
from aretry.exceptions import OperationCancelledError
from aretry.retry.config import CallbackConfig, RetryConfig
from aretry.retry.decider import RetryDecider
from aretry.retry.executor_core import (
    create_cancelled_result,
    create_exhausted_result,
    create_success_result,
)
from aretry.retry.manager import CallbackManager
from aretry.retry.strategy import RetryStrategy
from aretry.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from aretry.cancellation import CancellationToken
    from aretry.retry.context import RetryResult

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class AsyncRetryExecutor:
    """Executes async operations with automatic retry logic.

    This class implements the core retry loop for coroutine functions.
    Each attempt runs in its own task, raced against the effective
    cancellation token: if the token fires first, the task is cancelled
    and the call ends through the cancellation/timeout path, even if the
    operation never looks at the token.

    The executor orchestrates the following components:
    - RetryStrategy: Calculates the delay between attempts
    - RetryDecider: Determines whether a failed attempt is retried
    - CallbackManager: Invokes the lifecycle hooks with error isolation

    Hooks may be coroutine functions; they are awaited before the loop
    moves on.

    Attributes:
        config: Retry configuration.
        callback_config: Hook configuration.
        strategy: Strategy for calculating retry delays.
        decider: Logic for deciding whether to retry.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aretry.retry import AsyncRetryExecutor, RetryConfig
        >>> async def fetch(token):
        ...     return "done"
        ...
        >>> executor = AsyncRetryExecutor(RetryConfig(max_attempts=3, base_delay=0.0))
        >>> result = asyncio.run(executor.execute(fetch))
        >>> result.succeeded, result.value, result.attempts
        (True, 'done', 1)

        ```
    """

    def __init__(
        self,
        retry_config: RetryConfig | None = None,
        callback_config: CallbackConfig | None = None,
    ) -> None:
        """Initialize async retry executor.

        Args:
            retry_config: Configuration for retry behavior. Defaults to
                ``RetryConfig()``.
            callback_config: Configuration for lifecycle hooks. Defaults
                to no hooks.
        """
        self.config = retry_config if retry_config is not None else RetryConfig()
        self.callback_config = callback_config if callback_config is not None else CallbackConfig()
        self.strategy: RetryStrategy = RetryStrategy(self.config.base_delay, self.config.strategy)
        self.decider: RetryDecider = RetryDecider(
            self.config.max_attempts, self.config.should_retry
        )

    async def execute(
        self,
        operation: Callable[[CancellationToken], Awaitable[T]],
        cancellation_token: CancellationToken | None = None,
    ) -> RetryResult[T]:
        """Execute an async operation until it succeeds or the retry
        sequence ends.

        The retry loop handles:
        - Success: invokes on_success and returns immediately
        - Cancellation signal while the token has fired: returns a
          cancelled/timed-out result
        - Other errors: retried with a delay while attempts remain and
          the predicate allows it, otherwise invokes on_failure and
          returns an exhausted result

        Note:
            Cancelling the task that awaits this method is not a token
            cancellation: ``asyncio.CancelledError`` propagates to the
            caller as usual.

        Args:
            operation: The coroutine function to run. It receives the
                effective cancellation token.
            cancellation_token: Optional external cancellation token.

        Returns:
            The terminal result. Operation and cancellation errors are
            never raised; they are wrapped in ``result.error``.
        """
        started = time.monotonic()
        callbacks = CallbackManager(self.callback_config, datetime.now(tz=timezone.utc))
        attempt = 0
        last_attempt_duration = 0.0
        last_error: Exception | None = None

        with compose_cancellation(cancellation_token, self.config.total_timeout) as token:
            while True:
                if token.is_cancelled:
                    return create_cancelled_result(
                        token,
                        attempts=attempt,
                        elapsed_time=time.monotonic() - started,
                        last_attempt_duration=last_attempt_duration,
                        total_timeout=self.config.total_timeout,
                        cause=last_error,
                    )

                attempt += 1
                attempt_started = time.monotonic()
                try:
                    value = await self._invoke(operation, token)
                except Exception as exc:
                    last_attempt_duration = time.monotonic() - attempt_started
                    last_error = exc

                    if self.decider.is_cancellation(exc, token):
                        return create_cancelled_result(
                            token,
                            attempts=attempt,
                            elapsed_time=time.monotonic() - started,
                            last_attempt_duration=last_attempt_duration,
                            total_timeout=self.config.total_timeout,
                            cause=exc,
                        )

                    should_retry, reason = self.decider.should_retry_exception(exc, attempt)
                    if not should_retry:
                        result = create_exhausted_result(
                            exc,
                            attempts=attempt,
                            elapsed_time=time.monotonic() - started,
                            last_attempt_duration=last_attempt_duration,
                        )
                        await callbacks.on_failure_async(attempt, exc)
                        return result

                    delay = self.strategy.calculate_delay(attempt)
                    log_structured(
                        logger,
                        logging.DEBUG,
                        f"Attempt {attempt} failed, will retry ({reason})",
                        attempt=attempt,
                        delay=delay,
                    )
                    await callbacks.on_retry_async(attempt, exc, delay)
                    if delay > 0 and await token.wait_async(delay):
                        return create_cancelled_result(
                            token,
                            attempts=attempt,
                            elapsed_time=time.monotonic() - started,
                            last_attempt_duration=last_attempt_duration,
                            total_timeout=self.config.total_timeout,
                            cause=exc,
                        )
                    continue

                last_attempt_duration = time.monotonic() - attempt_started
                result = create_success_result(
                    value,
                    attempts=attempt,
                    elapsed_time=time.monotonic() - started,
                    last_attempt_duration=last_attempt_duration,
                )
                await callbacks.on_success_async(attempt)
                return result

    async def _invoke(
        self,
        operation: Callable[[CancellationToken], Awaitable[T]],
        token: CancellationToken,
    ) -> T:
        """Run one attempt, raced against the cancellation token.

        Raises:
            OperationCancelledError: If the attempt was cancelled, by
                the token or by the operation itself.
        """
        outcome: Any = operation(token)
        if not inspect.isawaitable(outcome):
            return outcome

        task = asyncio.ensure_future(outcome)
        waiter = asyncio.ensure_future(token.wait_async())
        try:
            await asyncio.wait((task, waiter), return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()
                await asyncio.wait((task,))

        if task.cancelled():
            raise OperationCancelledError(token.reason)
        return task.result()
