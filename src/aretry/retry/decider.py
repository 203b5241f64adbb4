r"""Retry decision logic for failed attempts.

This module provides the RetryDecider class that decides whether a
failed attempt should be retried based on the remaining attempts and
the optional retry predicate.
"""

from __future__ import annotations

__all__ = ["RetryDecider"]

import asyncio
import logging
from typing import TYPE_CHECKING

from aretry.exceptions import OperationCancelledError

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.cancellation import CancellationToken

logger: logging.Logger = logging.getLogger(__name__)


class RetryDecider:
    """Decides whether a failed attempt should be retried."""

    def __init__(
        self,
        max_attempts: int,
        should_retry: Callable[[Exception], bool] | None,
    ) -> None:
        """Initialize retry decider.

        Args:
            max_attempts: Maximum number of attempts.
            should_retry: Optional retry predicate.
        """
        self.max_attempts = max_attempts
        self.should_retry = should_retry

    @staticmethod
    def is_cancellation(exception: BaseException, token: CancellationToken) -> bool:
        """Determine if an exception ends the call through the
        cancellation/timeout path.

        A cancellation error only counts when the effective token has
        actually fired. Otherwise it is an ordinary operation error.

        Args:
            exception: The exception raised by the attempt.
            token: The effective cancellation token.

        Returns:
            True if the exception is a cancellation signal and the token
            has fired.
        """
        if not isinstance(exception, (OperationCancelledError, asyncio.CancelledError)):
            return False
        return token.is_cancelled

    def should_retry_exception(self, exception: Exception, attempt: int) -> tuple[bool, str]:
        """Determine if exception should trigger retry.

        Exceptions raised by the predicate itself propagate.

        Args:
            exception: The exception to evaluate.
            attempt: The attempt that raised it (1-indexed).

        Returns:
            Tuple of (should_retry, reason).
        """
        if attempt >= self.max_attempts:
            return (False, "max attempts exhausted")
        if self.should_retry is not None and not self.should_retry(exception):
            logger.debug(f"{type(exception).__name__} rejected by the retry predicate")
            return (False, "should_retry returned False")
        return (True, type(exception).__name__)
