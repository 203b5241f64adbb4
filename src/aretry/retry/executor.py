r"""Synchronous retry executor.

This module provides the RetryExecutor class that runs a blocking
operation with automatic retry logic.
"""

from __future__ import annotations

__all__ = ["RetryExecutor"]

import asyncio
import inspect
import logging
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, TypeVar

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
    from collections.abc import Callable

    from aretry.cancellation import CancellationToken
    from aretry.retry.context import RetryResult

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class RetryExecutor:
    """Executes blocking operations with automatic retry logic.

    The executor orchestrates the following components:
    - RetryStrategy: Calculates the delay between attempts
    - RetryDecider: Determines whether a failed attempt is retried
    - CallbackManager: Invokes the lifecycle hooks with error isolation

    A running operation cannot be preempted from the calling thread.
    The effective cancellation token is passed to the operation, which
    should observe it (e.g. with ``token.raise_if_cancelled()``), and
    the executor checks it before every attempt and during every delay.

    Attributes:
        config: Retry configuration.
        callback_config: Hook configuration.
        strategy: Strategy for calculating retry delays.
        decider: Logic for deciding whether to retry.

    Example:
        ```pycon
        >>> from aretry.retry import CallbackConfig, RetryConfig, RetryExecutor
        >>> executor = RetryExecutor(RetryConfig(max_attempts=3, base_delay=0.0))
        >>> result = executor.execute(lambda token: "done")
        >>> result.succeeded, result.value, result.attempts
        (True, 'done', 1)

        ```
    """

    def __init__(
        self,
        retry_config: RetryConfig | None = None,
        callback_config: CallbackConfig | None = None,
    ) -> None:
        """Initialize retry executor.

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

    def execute(
        self,
        operation: Callable[[CancellationToken], T],
        cancellation_token: CancellationToken | None = None,
    ) -> RetryResult[T]:
        """Execute an operation until it succeeds or the retry sequence
        ends.

        Args:
            operation: The function to run. It receives the effective
                cancellation token.
            cancellation_token: Optional external cancellation token.

        Returns:
            The terminal result. Operation and cancellation errors are
            never raised; they are wrapped in ``result.error``.

        Raises:
            TypeError: If ``operation`` returns an awaitable. Use
                ``AsyncRetryExecutor`` for coroutine functions.
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
                    value = self._invoke(operation, token)
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
                        callbacks.on_failure(attempt, exc)
                        return result

                    delay = self.strategy.calculate_delay(attempt)
                    log_structured(
                        logger,
                        logging.DEBUG,
                        f"Attempt {attempt} failed, will retry ({reason})",
                        attempt=attempt,
                        delay=delay,
                    )
                    callbacks.on_retry(attempt, exc, delay)
                    if delay > 0 and token.wait(delay):
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
                if inspect.isawaitable(value):
                    if inspect.iscoroutine(value):
                        value.close()
                    msg = (
                        "operation returned an awaitable; use AsyncRetryExecutor or "
                        "execute_async for coroutine functions"
                    )
                    raise TypeError(msg)

                result = create_success_result(
                    value,
                    attempts=attempt,
                    elapsed_time=time.monotonic() - started,
                    last_attempt_duration=last_attempt_duration,
                )
                callbacks.on_success(attempt)
                return result

    def _invoke(
        self,
        operation: Callable[[CancellationToken], T],
        token: CancellationToken,
    ) -> T:
        """Run one attempt.

        Raises:
            OperationCancelledError: If the operation raised
                ``asyncio.CancelledError``, e.g. from a cancelled
                ``asyncio.run`` call.
        """
        try:
            return operation(token)
        except asyncio.CancelledError as exc:
            raise OperationCancelledError(token.reason) from exc
