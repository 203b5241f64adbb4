r"""Exceptions raised or returned by the retry engine.

This module provides the terminal error types that summarize why a
retry sequence ultimately failed, plus the cancellation signal that
operations raise when they observe a triggered cancellation token.
"""

from __future__ import annotations

__all__ = [
    "OperationCancelledError",
    "RetryCancelledError",
    "RetryConfigurationError",
    "RetryFailedError",
]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aretry.cancellation import CancellationReason


class OperationCancelledError(Exception):
    """Exception raised by an operation that observed a triggered
    cancellation token.

    Args:
        reason: Why the token fired, if known.

    Example:
        ```pycon
        >>> from aretry.cancellation import CancellationReason
        >>> from aretry.exceptions import OperationCancelledError
        >>> exc = OperationCancelledError(CancellationReason.TIMEOUT)
        >>> exc.reason
        <CancellationReason.TIMEOUT: 'timeout'>

        ```
    """

    def __init__(self, reason: CancellationReason | None = None) -> None:
        reason_text = reason.value if reason is not None else "unknown"
        super().__init__(f"Operation was cancelled (reason: {reason_text})")
        self.reason = reason


class RetryFailedError(Exception):
    """Terminal error describing a failed retry sequence.

    The original triggering error is available as ``cause`` and is also
    chained as ``__cause__`` so tracebacks show it.

    Args:
        message: A descriptive error message.
        attempts: The number of operation invocations made.
        elapsed_time: Total wall-clock time spent, in seconds.
        cause: The original exception that triggered the failure.

    Example:
        ```pycon
        >>> from aretry.exceptions import RetryFailedError
        >>> error = RetryFailedError(
        ...     "Operation failed after 2 attempt(s). See the cause for details.",
        ...     attempts=2,
        ...     elapsed_time=0.5,
        ...     cause=ValueError("boom"),
        ... )
        >>> error.attempts
        2
        >>> error.cause
        ValueError('boom')

        ```
    """

    def __init__(
        self,
        message: str,
        *,
        attempts: int,
        elapsed_time: float,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.attempts = attempts
        self.elapsed_time = elapsed_time
        self.cause = cause
        self.__cause__ = cause


class RetryCancelledError(RetryFailedError):
    """Terminal error of the cancellation/timeout path.

    ``reason`` tells an external cancellation apart from an expired
    total-timeout budget.

    Args:
        message: A descriptive error message.
        attempts: The number of operation invocations made.
        elapsed_time: Total wall-clock time spent, in seconds.
        reason: Why the effective cancellation token fired.
        cause: The exception raised by the interrupted operation, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        attempts: int,
        elapsed_time: float,
        reason: CancellationReason,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, attempts=attempts, elapsed_time=elapsed_time, cause=cause)
        self.reason = reason


class RetryConfigurationError(RetryFailedError, ValueError):
    """Exception raised when a retry policy is configured with invalid
    values.

    It is raised at configuration time, before any attempt is made, so
    ``attempts`` is always 0.

    Args:
        message: A descriptive error message.

    Example:
        ```pycon
        >>> from aretry.exceptions import RetryConfigurationError
        >>> raise RetryConfigurationError("Exception filter predicate cannot be None.")
        Traceback (most recent call last):
            ...
        aretry.exceptions.RetryConfigurationError: Exception filter predicate cannot be None.

        ```
    """

    def __init__(self, message: str) -> None:
        super().__init__(message, attempts=0, elapsed_time=0.0)
