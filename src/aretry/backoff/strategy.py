r"""Delay strategy selection and the pure delay calculator.

This module maps the ``DelayStrategy`` enum onto the backoff strategy
classes and provides ``calculate_delay``, the function the retry engine
uses to turn (attempt, base delay, strategy) into a wait duration.
"""

from __future__ import annotations

__all__ = [
    "BackoffStrategy",
    "DelayStrategy",
    "calculate_delay",
    "resolve_backoff_strategy",
]

from enum import Enum
from typing import TYPE_CHECKING

from aretry.backoff.base import BaseBackoffStrategy
from aretry.backoff.constant import ConstantBackoff
from aretry.backoff.exponential import ExponentialBackoff
from aretry.backoff.jitter import ExponentialJitterBackoff

if TYPE_CHECKING:
    import random


class DelayStrategy(Enum):
    """Built-in delay strategies.

    Attributes:
        FIXED: Wait the base delay before every retry.
        EXPONENTIAL: Double the delay after each failed attempt.
        EXPONENTIAL_WITH_JITTER: Exponential delay perturbed by up to
            +/- 20% random jitter.
    """

    FIXED = "fixed"
    EXPONENTIAL = "exponential"
    EXPONENTIAL_WITH_JITTER = "exponential_with_jitter"


# Either a built-in strategy name or a custom strategy instance
BackoffStrategy = DelayStrategy | BaseBackoffStrategy


def resolve_backoff_strategy(
    strategy: BackoffStrategy,
    base_delay: float,
    rng: random.Random | None = None,
) -> BaseBackoffStrategy:
    """Return the backoff strategy instance for a strategy selector.

    Args:
        strategy: A ``DelayStrategy`` value, or a ``BaseBackoffStrategy``
            instance which is returned unchanged.
        base_delay: The base delay in seconds fed into built-in
            strategies.
        rng: Optional random number generator for the jitter strategy.

    Returns:
        The backoff strategy instance.

    Raises:
        TypeError: If ``strategy`` is neither a ``DelayStrategy`` nor a
            ``BaseBackoffStrategy``.

    Example:
        ```pycon
        >>> from aretry.backoff import DelayStrategy, resolve_backoff_strategy
        >>> resolve_backoff_strategy(DelayStrategy.EXPONENTIAL, base_delay=0.5)
        ExponentialBackoff(base_delay=0.5)

        ```
    """
    if isinstance(strategy, BaseBackoffStrategy):
        return strategy
    if strategy is DelayStrategy.FIXED:
        return ConstantBackoff(delay=base_delay)
    if strategy is DelayStrategy.EXPONENTIAL:
        return ExponentialBackoff(base_delay=base_delay)
    if strategy is DelayStrategy.EXPONENTIAL_WITH_JITTER:
        return ExponentialJitterBackoff(base_delay=base_delay, rng=rng)
    msg = f"Unsupported delay strategy: {strategy!r}"
    raise TypeError(msg)


def calculate_delay(
    attempt: int,
    base_delay: float,
    strategy: BackoffStrategy = DelayStrategy.FIXED,
    rng: random.Random | None = None,
) -> float:
    """Calculate the delay to wait after a failed attempt.

    Args:
        attempt: The number of the attempt that just failed (1-indexed).
        base_delay: The base delay in seconds. Must be >= 0.
        strategy: The delay strategy.
        rng: Optional random number generator for the jitter strategy.

    Returns:
        The delay in seconds, always >= 0.

    Example:
        ```pycon
        >>> from aretry.backoff import DelayStrategy, calculate_delay
        >>> calculate_delay(3, 0.2, DelayStrategy.FIXED)
        0.2
        >>> calculate_delay(3, 0.25, DelayStrategy.EXPONENTIAL)
        1.0

        ```
    """
    return resolve_backoff_strategy(strategy, base_delay=base_delay, rng=rng).calculate(attempt)
