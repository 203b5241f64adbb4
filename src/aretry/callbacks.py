r"""Lifecycle hook invocation with per-hook error isolation.

This module provides the functions the retry engine uses to call the
user-defined lifecycle hooks:

- on_retry: Called after a failed attempt, before waiting for the delay
- on_success: Called once when an attempt succeeds
- on_failure: Called once when the retry sequence fails

Hooks are observers. An exception raised by a hook is logged with its
traceback and discarded: it never changes the outcome of the retry
call, never reaches the caller, and never counts as an attempt.

Example:
    ```pycon
    >>> from aretry import execute
    >>> from aretry.retry.context import RetryContext
    >>> def log_retry(context: RetryContext) -> None:
    ...     print(f"Attempt {context.attempt} failed, waiting {context.delay}s")
    ...
    >>> result = execute(lambda token: 42, on_retry=log_retry)
    >>> result.value
    42

    ```
"""

from __future__ import annotations

__all__ = ["Hook", "ainvoke_hook", "invoke_hook"]

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from aretry.retry.context import RetryContext

logger: logging.Logger = logging.getLogger(__name__)

# A hook is a plain function or a coroutine function taking a RetryContext
Hook = Callable[["RetryContext"], Any]


def invoke_hook(hook: Hook | None, context: RetryContext, *, name: str) -> None:
    """Invoke a hook from synchronous code, isolating its errors.

    A hook that returns an awaitable is run to completion with
    ``asyncio.run``. That is only possible when no event loop is
    running in the current thread; otherwise the failure is logged like
    any other hook error.

    Args:
        hook: Optional hook to invoke.
        context: The context passed to the hook.
        name: The hook name, used in log messages.
    """
    if hook is None:
        return
    try:
        outcome = hook(context)
        if inspect.isawaitable(outcome):
            _run_awaitable(outcome)
    except Exception:
        logger.warning(f"{name} hook failed for attempt {context.attempt}", exc_info=True)


async def ainvoke_hook(hook: Hook | None, context: RetryContext, *, name: str) -> None:
    """Invoke a hook from a coroutine, isolating its errors.

    A hook that returns an awaitable is awaited before returning, so
    the retry loop does not advance until the hook has finished.

    Args:
        hook: Optional hook to invoke.
        context: The context passed to the hook.
        name: The hook name, used in log messages.
    """
    if hook is None:
        return
    try:
        outcome = hook(context)
        if inspect.isawaitable(outcome):
            await outcome
    except Exception:
        logger.warning(f"{name} hook failed for attempt {context.attempt}", exc_info=True)


def _run_awaitable(awaitable: Awaitable[Any]) -> None:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        pass
    else:
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        msg = "cannot run an async hook from a thread with a running event loop"
        raise RuntimeError(msg)

    async def consume() -> None:
        await awaitable

    asyncio.run(consume())
