r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

import math

from aretry.backoff.base import BaseBackoffStrategy


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as: base_delay * (2 ** (attempt - 1)), so the first
    retry waits ``base_delay``, the second twice as long, and so on.

    No ceiling is applied: the delay grows without bound, up to
    ``math.inf`` once it no longer fits in a float. Callers that need a
    maximum delay should limit ``max_attempts`` or use a custom
    strategy.

    Args:
        base_delay: The delay in seconds after the first failed attempt
            (default: 0.2).

    Example:
        ```pycon
        >>> from aretry.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_delay=0.3)
        >>> backoff.calculate(1)
        0.3
        >>> backoff.calculate(2)
        0.6
        >>> backoff.calculate(3)
        1.2

        ```
    """

    def __init__(self, base_delay: float = 0.2) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)

        self.base_delay = base_delay

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(base_delay={self.base_delay})"

    def calculate(self, attempt: int) -> float:
        """Calculate exponential backoff delay.

        Args:
            attempt: The number of the attempt that just failed
                (1-indexed).

        Returns:
            The calculated delay: base_delay * (2 ** (attempt - 1)), or
            ``math.inf`` once the delay no longer fits in a float.
        """
        if self.base_delay == 0:
            return 0.0
        try:
            return self.base_delay * 2.0 ** max(attempt - 1, 0)
        except OverflowError:
            return math.inf
