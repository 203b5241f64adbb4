r"""Cancellation tokens and their composition with a total-time budget.

A ``CancellationToken`` is a one-shot, thread-safe signal. The retry
engine builds one effective token per call with ``compose_cancellation``:
it fires when the caller's token fires or when the optional total
timeout expires, and it records which of the two happened.

Example:
    ```pycon
    >>> from aretry.cancellation import CancellationToken, compose_cancellation
    >>> token = CancellationToken()
    >>> with compose_cancellation(token, total_timeout=30.0) as effective:
    ...     token.cancel()
    ...     effective.is_cancelled
    ...
    True

    ```
"""

from __future__ import annotations

__all__ = ["CancellationReason", "CancellationToken", "compose_cancellation"]

import asyncio
import math
import threading
import time
from contextlib import contextmanager
from enum import Enum
from typing import TYPE_CHECKING

from aretry.exceptions import OperationCancelledError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


class CancellationReason(Enum):
    """Why a cancellation token fired.

    Attributes:
        CANCELLED: ``cancel()`` was called, on the token or on a parent.
        TIMEOUT: The token's deadline passed.
    """

    CANCELLED = "cancelled"
    TIMEOUT = "timeout"


class CancellationToken:
    r"""One-shot cancellation signal shared between a caller and an
    operation.

    The token fires either when ``cancel()`` is called or, if it has a
    deadline, the first time it is observed after the deadline passed.
    Once fired it stays fired and its ``reason`` never changes.

    Thread-safe implementation using a lock and a ``threading.Event``.
    Waiting is supported both from threads (``wait``) and from asyncio
    coroutines (``wait_async``).

    Args:
        deadline: Optional ``time.monotonic()`` timestamp after which
            the token fires with ``CancellationReason.TIMEOUT``.

    Example:
        ```pycon
        >>> from aretry.cancellation import CancellationReason, CancellationToken
        >>> token = CancellationToken()
        >>> token.is_cancelled
        False
        >>> token.cancel()
        True
        >>> token.reason
        <CancellationReason.CANCELLED: 'cancelled'>
        >>> CancellationToken.with_timeout(0.0).reason
        <CancellationReason.TIMEOUT: 'timeout'>

        ```
    """

    def __init__(self, *, deadline: float | None = None) -> None:
        self._deadline = deadline
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._reason: CancellationReason | None = None
        self._callbacks: list[Callable[[CancellationReason], None]] = []
        self._parent: CancellationToken | None = None

    def __repr__(self) -> str:
        state = self._reason.value if self.is_cancelled else "active"
        return f"{self.__class__.__qualname__}(state={state}, deadline={self._deadline})"

    @classmethod
    def with_timeout(cls, timeout: float) -> CancellationToken:
        """Create a token that fires ``timeout`` seconds from now.

        Args:
            timeout: The time budget in seconds. Values <= 0 create an
                already-expired token.

        Returns:
            The new token.
        """
        return cls(deadline=time.monotonic() + timeout)

    @classmethod
    def create_linked(
        cls, parent: CancellationToken | None = None, timeout: float | None = None
    ) -> CancellationToken:
        """Create a token that fires when ``parent`` fires or when
        ``timeout`` expires, whichever comes first.

        Call ``close()`` on the returned token once it is no longer
        needed to detach it from ``parent``.

        Args:
            parent: Optional token whose cancellation propagates to the
                new token, with the same reason.
            timeout: Optional time budget in seconds.

        Returns:
            The linked token.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)

        token = cls(deadline=deadline)
        if parent is not None:
            token._parent = parent
            parent.add_callback(token._on_parent_cancelled)
        return token

    @property
    def deadline(self) -> float | None:
        """The ``time.monotonic()`` deadline, or None if the token has
        no time budget."""
        return self._deadline

    @property
    def is_cancelled(self) -> bool:
        """Whether the token has fired.

        Observing an expired deadline, or a fired parent, fires the
        token.
        """
        if self._event.is_set():
            return True
        if self._parent is not None and self._parent.is_cancelled:
            self.cancel(self._parent.reason or CancellationReason.CANCELLED)
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self.cancel(CancellationReason.TIMEOUT)
            return True
        return False

    @property
    def reason(self) -> CancellationReason | None:
        """Why the token fired, or None if it has not fired."""
        if not self.is_cancelled:
            return None
        return self._reason

    def remaining(self) -> float | None:
        """Return the seconds left before the deadline.

        Returns:
            The remaining time, floored at 0, or None if the token has
            no deadline.
        """
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self, reason: CancellationReason = CancellationReason.CANCELLED) -> bool:
        """Fire the token.

        Registered callbacks are invoked once, in registration order,
        outside the lock.

        Args:
            reason: Why the token fires.

        Returns:
            True if this call fired the token, False if it had already
            fired.
        """
        with self._lock:
            if self._event.is_set():
                return False
            self._reason = reason
            self._event.set()
            callbacks = self._callbacks
            self._callbacks = []

        for callback in callbacks:
            callback(reason)
        return True

    def raise_if_cancelled(self) -> None:
        """Raise ``OperationCancelledError`` if the token has fired.

        Raises:
            OperationCancelledError: If the token has fired.
        """
        if self.is_cancelled:
            raise OperationCancelledError(self._reason)

    def add_callback(self, callback: Callable[[CancellationReason], None]) -> None:
        """Register a callback invoked with the reason when the token
        fires.

        The callback runs immediately if the token already fired. It is
        not invoked for a deadline nobody observes; use ``wait`` or
        ``wait_async`` to be woken up at the deadline.

        Args:
            callback: The function to invoke.
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
            reason = self._reason
        callback(reason)

    def remove_callback(self, callback: Callable[[CancellationReason], None]) -> None:
        """Unregister a callback. Unknown callbacks are ignored."""
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def close(self) -> None:
        """Detach the token from its parent, if any."""
        if self._parent is not None:
            self._parent.remove_callback(self._on_parent_cancelled)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the token fires or ``timeout`` seconds elapse.

        Args:
            timeout: Optional maximum time to wait in seconds. If None
                or infinite, wait until the token fires.

        Returns:
            True if the token fired, False if the timeout elapsed first.
        """
        end = None if timeout is None or math.isinf(timeout) else time.monotonic() + timeout
        while not self.is_cancelled:
            wait_time = self._time_left(end)
            if wait_time is not None and wait_time <= 0:
                return False
            self._event.wait(wait_time)
        return True

    async def wait_async(self, timeout: float | None = None) -> bool:
        """Wait without blocking the event loop until the token fires or
        ``timeout`` seconds elapse.

        Args:
            timeout: Optional maximum time to wait in seconds. If None
                or infinite, wait until the token fires.

        Returns:
            True if the token fired, False if the timeout elapsed first.
        """
        if self.is_cancelled:
            return True

        loop = asyncio.get_running_loop()
        waiter = asyncio.Event()

        def wake(reason: CancellationReason) -> None:  # noqa: ARG001
            loop.call_soon_threadsafe(waiter.set)

        self.add_callback(wake)
        try:
            end = None if timeout is None or math.isinf(timeout) else time.monotonic() + timeout
            while not self.is_cancelled:
                wait_time = self._time_left(end)
                if wait_time is not None and wait_time <= 0:
                    return False
                try:
                    await asyncio.wait_for(waiter.wait(), timeout=wait_time)
                except asyncio.TimeoutError:
                    pass
        finally:
            self.remove_callback(wake)
        return True

    def _time_left(self, end: float | None) -> float | None:
        candidates = [value for value in (end, self._deadline) if value is not None]
        if not candidates:
            return None
        return min(candidates) - time.monotonic()

    def _on_parent_cancelled(self, reason: CancellationReason) -> None:
        self.cancel(reason)


@contextmanager
def compose_cancellation(
    token: CancellationToken | None = None,
    total_timeout: float | None = None,
) -> Iterator[CancellationToken]:
    """Build the effective cancellation token for one retry call.

    The effective token fires when ``token`` fires (reason
    ``CANCELLED``) or when ``total_timeout`` seconds have elapsed since
    entering the context (reason ``TIMEOUT``). If no timeout is given,
    the caller's token is used unchanged. The effective token is
    detached from ``token`` on exit.

    Args:
        token: Optional externally supplied cancellation token.
        total_timeout: Optional total time budget in seconds. Values
            <= 0 mean the budget has already expired.

    Yields:
        The effective cancellation token.

    Example:
        ```pycon
        >>> from aretry.cancellation import compose_cancellation
        >>> with compose_cancellation(None, total_timeout=0.0) as effective:
        ...     effective.reason
        ...
        <CancellationReason.TIMEOUT: 'timeout'>

        ```
    """
    if total_timeout is None and token is not None:
        yield token
        return

    effective = CancellationToken.create_linked(token, timeout=total_timeout)
    try:
        yield effective
    finally:
        effective.close()
