r"""Callback manager for orchestrating retry lifecycle events.

This module provides the CallbackManager class that builds a fresh
``RetryContext`` for every hook invocation and dispatches it with error
isolation.
"""

from __future__ import annotations

__all__ = ["CallbackManager"]

from typing import TYPE_CHECKING

from aretry.callbacks import ainvoke_hook, invoke_hook
from aretry.retry.context import RetryContext

if TYPE_CHECKING:
    from datetime import datetime

    from aretry.retry.config import CallbackConfig


class CallbackManager:
    """Manages hook invocations during the retry lifecycle.

    Every method has a synchronous form, used by ``RetryExecutor``, and
    an ``_async`` form, used by ``AsyncRetryExecutor``, which awaits
    asynchronous hooks.

    Attributes:
        callbacks: Configuration containing the hook functions.
        start_time: When the retry call started (UTC).
    """

    def __init__(self, callbacks: CallbackConfig, start_time: datetime) -> None:
        """Initialize callback manager.

        Args:
            callbacks: Callback configuration.
            start_time: When the retry call started (UTC).
        """
        self.callbacks = callbacks
        self.start_time = start_time

    def on_retry(self, attempt: int, error: Exception, delay: float) -> None:
        """Invoke on_retry hook.

        Args:
            attempt: The attempt that failed (1-indexed).
            error: Exception that triggered the retry.
            delay: Delay in seconds before the next attempt.
        """
        invoke_hook(self.callbacks.on_retry, self._context(attempt, error, delay), name="on_retry")

    def on_success(self, attempt: int) -> None:
        """Invoke on_success hook.

        Args:
            attempt: The attempt that succeeded (1-indexed).
        """
        invoke_hook(self.callbacks.on_success, self._context(attempt, None), name="on_success")

    def on_failure(self, attempt: int, error: Exception) -> None:
        """Invoke on_failure hook.

        Args:
            attempt: The final attempt (1-indexed).
            error: The error that ended the retry sequence.
        """
        invoke_hook(self.callbacks.on_failure, self._context(attempt, error), name="on_failure")

    async def on_retry_async(self, attempt: int, error: Exception, delay: float) -> None:
        await ainvoke_hook(
            self.callbacks.on_retry, self._context(attempt, error, delay), name="on_retry"
        )

    async def on_success_async(self, attempt: int) -> None:
        await ainvoke_hook(
            self.callbacks.on_success, self._context(attempt, None), name="on_success"
        )

    async def on_failure_async(self, attempt: int, error: Exception) -> None:
        await ainvoke_hook(
            self.callbacks.on_failure, self._context(attempt, error), name="on_failure"
        )

    def _context(self, attempt: int, error: Exception | None, delay: float = 0.0) -> RetryContext:
        return RetryContext(
            attempt=attempt,
            last_exception=error,
            delay=delay,
            start_time=self.start_time,
        )
