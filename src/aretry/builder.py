r"""Fluent configuration front door for the retry engine.

``RetryBuilder`` collects the retry policy step by step and forwards it
verbatim to the engine when an operation is run.

Example:
    ```pycon
    >>> from aretry import DelayStrategy, RetryBuilder
    >>> result = (
    ...     RetryBuilder.configure()
    ...     .with_max_attempts(5)
    ...     .with_base_delay(0.0)
    ...     .with_strategy(DelayStrategy.EXPONENTIAL)
    ...     .with_filter_by_type(ConnectionError)
    ...     .execute(lambda token: "ok")
    ... )
    >>> result.value
    'ok'

    ```
"""

from __future__ import annotations

__all__ = ["RetryBuilder"]

from typing import TYPE_CHECKING, Any, TypeVar

from aretry.backoff.strategy import DelayStrategy
from aretry.exceptions import RetryConfigurationError
from aretry.execute import execute, run
from aretry.execute_async import execute_async, run_async
from aretry.predicates import retry_on_exception_types
from aretry.retry.config import DEFAULT_MAX_ATTEMPTS, CallbackConfig, RetryConfig

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from aretry.backoff.strategy import BackoffStrategy
    from aretry.callbacks import Hook
    from aretry.cancellation import CancellationToken
    from aretry.retry.context import RetryResult

T = TypeVar("T")


class RetryBuilder:
    """Fluent builder for retry policies.

    Every ``with_*`` and ``on_*`` method stores one setting and returns
    the builder, so calls can be chained. The terminal methods
    (``execute``, ``execute_async``, ``run``, ``run_async``) call the
    engine once with the stored settings; the builder can be reused.

    Example:
        ```pycon
        >>> from aretry import RetryBuilder
        >>> builder = RetryBuilder.configure().with_max_attempts(2).with_base_delay(0.0)
        >>> retry_config, callback_config = builder.build()
        >>> retry_config.max_attempts
        2

        ```
    """

    def __init__(self) -> None:
        self._max_attempts = DEFAULT_MAX_ATTEMPTS
        self._base_delay: float | None = None
        self._strategy: BackoffStrategy = DelayStrategy.FIXED
        self._should_retry: Callable[[Exception], bool] | None = None
        self._total_timeout: float | None = None
        self._on_retry: Hook | None = None
        self._on_success: Hook | None = None
        self._on_failure: Hook | None = None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(max_attempts={self._max_attempts}, "
            f"base_delay={self._base_delay}, strategy={self._strategy}, "
            f"total_timeout={self._total_timeout})"
        )

    @classmethod
    def configure(cls) -> RetryBuilder:
        """Create a builder with the default policy."""
        return cls()

    @classmethod
    def for_type(cls, result_type: type[T]) -> RetryBuilder:  # noqa: ARG003
        """Create a builder, documenting the expected result type.

        The result type is not enforced; it only makes call sites more
        explicit. This behaves like ``configure()``.

        Args:
            result_type: The type the operation is expected to return.

        Returns:
            A new builder.
        """
        return cls()

    def with_max_attempts(self, attempts: int) -> RetryBuilder:
        """Set the maximum number of attempts, including the first.

        Values lower than 1 are treated as 1 when the policy runs.
        """
        self._max_attempts = attempts
        return self

    def with_base_delay(self, delay: float | None) -> RetryBuilder:
        """Set the base delay in seconds.

        Its meaning depends on the delay strategy. None or negative
        values are treated as 0.2 when the policy runs.
        """
        self._base_delay = delay
        return self

    def with_strategy(self, strategy: BackoffStrategy) -> RetryBuilder:
        """Set the delay strategy (a ``DelayStrategy`` or a custom
        backoff strategy instance)."""
        self._strategy = strategy
        return self

    def with_filter_by_predicate(self, predicate: Callable[[Exception], bool]) -> RetryBuilder:
        """Retry only the errors for which ``predicate`` returns True.

        Args:
            predicate: The retry predicate.

        Returns:
            The builder.

        Raises:
            RetryConfigurationError: If ``predicate`` is None.
        """
        if predicate is None:
            msg = "Exception filter predicate cannot be None."
            raise RetryConfigurationError(msg)
        self._should_retry = predicate
        return self

    def with_filter_by_type(self, *exception_types: type[BaseException]) -> RetryBuilder:
        """Retry only errors of the given types or their subclasses.

        Raises:
            ValueError: If no exception type is given.
            TypeError: If an argument is not an exception type.
        """
        self._should_retry = retry_on_exception_types(*exception_types)
        return self

    def with_total_timeout(self, timeout: float | None) -> RetryBuilder:
        """Set the total time budget in seconds, delays included.

        None disables the time budget.
        """
        self._total_timeout = timeout
        return self

    def on_retry(self, hook: Hook) -> RetryBuilder:
        """Register the hook invoked after each failed attempt that will
        be retried."""
        self._on_retry = hook
        return self

    def on_success(self, hook: Hook) -> RetryBuilder:
        """Register the hook invoked when an attempt succeeds."""
        self._on_success = hook
        return self

    def on_failure(self, hook: Hook) -> RetryBuilder:
        """Register the hook invoked when the retry sequence fails."""
        self._on_failure = hook
        return self

    def build(self) -> tuple[RetryConfig, CallbackConfig]:
        """Return the configuration objects of the current policy.

        Returns:
            The retry configuration and the callback configuration.
        """
        retry_config = RetryConfig(
            max_attempts=self._max_attempts,
            base_delay=self._base_delay,
            strategy=self._strategy,
            should_retry=self._should_retry,
            total_timeout=self._total_timeout,
        )
        callback_config = CallbackConfig(
            on_retry=self._on_retry,
            on_success=self._on_success,
            on_failure=self._on_failure,
        )
        return retry_config, callback_config

    def execute(
        self,
        operation: Callable[[CancellationToken], T],
        cancellation_token: CancellationToken | None = None,
    ) -> RetryResult[T]:
        """Run a blocking operation with the configured policy.

        Raises:
            TypeError: If ``operation`` is None.
        """
        _check_operation(operation)
        return execute(operation, cancellation_token=cancellation_token, **self._options())

    async def execute_async(
        self,
        operation: Callable[[CancellationToken], Awaitable[T]],
        cancellation_token: CancellationToken | None = None,
    ) -> RetryResult[T]:
        """Run a coroutine function with the configured policy.

        Raises:
            TypeError: If ``operation`` is None.
        """
        _check_operation(operation)
        return await execute_async(
            operation, cancellation_token=cancellation_token, **self._options()
        )

    def run(
        self,
        operation: Callable[[CancellationToken], object],
        cancellation_token: CancellationToken | None = None,
    ) -> None:
        """Run a blocking operation that produces no result.

        Raises:
            TypeError: If ``operation`` is None.
            RetryFailedError: If the retry sequence fails.
        """
        _check_operation(operation)
        run(operation, cancellation_token=cancellation_token, **self._options())

    async def run_async(
        self,
        operation: Callable[[CancellationToken], Awaitable[object]],
        cancellation_token: CancellationToken | None = None,
    ) -> None:
        """Run a coroutine function that produces no result.

        Raises:
            TypeError: If ``operation`` is None.
            RetryFailedError: If the retry sequence fails.
        """
        _check_operation(operation)
        await run_async(operation, cancellation_token=cancellation_token, **self._options())

    def _options(self) -> dict[str, Any]:
        return {
            "max_attempts": self._max_attempts,
            "base_delay": self._base_delay,
            "strategy": self._strategy,
            "should_retry": self._should_retry,
            "on_retry": self._on_retry,
            "on_success": self._on_success,
            "on_failure": self._on_failure,
            "total_timeout": self._total_timeout,
        }


def _check_operation(operation: object) -> None:
    if operation is None:
        msg = "operation cannot be None"
        raise TypeError(msg)
