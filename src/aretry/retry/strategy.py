r"""Retry strategy for calculating delays between attempts.

This module provides the RetryStrategy class used by the executors to
compute the wait after each failed attempt.
"""

from __future__ import annotations

__all__ = ["RetryStrategy"]

import logging
from typing import TYPE_CHECKING

from aretry.backoff.strategy import DelayStrategy, resolve_backoff_strategy

if TYPE_CHECKING:
    import random

    from aretry.backoff.base import BaseBackoffStrategy
    from aretry.backoff.strategy import BackoffStrategy

logger: logging.Logger = logging.getLogger(__name__)


class RetryStrategy:
    """Strategy for calculating retry delays.

    Args:
        base_delay: The base delay in seconds.
        strategy: Built-in ``DelayStrategy`` or a custom backoff
            strategy instance. Defaults to ``DelayStrategy.FIXED``.
        rng: Optional random number generator for the jitter strategy.

    Attributes:
        backoff_strategy: The resolved backoff strategy instance.

    Example:
        ```pycon
        >>> from aretry.backoff import DelayStrategy
        >>> from aretry.retry import RetryStrategy
        >>> strategy = RetryStrategy(0.5, DelayStrategy.EXPONENTIAL)
        >>> [strategy.calculate_delay(attempt) for attempt in (1, 2, 3)]
        [0.5, 1.0, 2.0]

        ```
    """

    def __init__(
        self,
        base_delay: float,
        strategy: BackoffStrategy = DelayStrategy.FIXED,
        rng: random.Random | None = None,
    ) -> None:
        self.backoff_strategy: BaseBackoffStrategy = resolve_backoff_strategy(
            strategy, base_delay=base_delay, rng=rng
        )

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay before the next attempt.

        Args:
            attempt: The attempt that just failed (1-indexed).

        Returns:
            Sleep time in seconds.
        """
        delay = self.backoff_strategy.calculate(attempt)
        logger.debug(f"Waiting {delay:.3f}s before attempt {attempt + 1}")
        return delay
