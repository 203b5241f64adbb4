r"""Backoff strategies and utilities for retry delays.

This package provides the backoff strategies used to compute the wait
between attempts: constant, exponential, and exponential with jitter.
"""

from __future__ import annotations

__all__ = [
    "BackoffStrategy",
    "BaseBackoffStrategy",
    "ConstantBackoff",
    "DelayStrategy",
    "ExponentialBackoff",
    "ExponentialJitterBackoff",
    "calculate_delay",
    "resolve_backoff_strategy",
]

from aretry.backoff.base import BaseBackoffStrategy
from aretry.backoff.constant import ConstantBackoff
from aretry.backoff.exponential import ExponentialBackoff
from aretry.backoff.jitter import ExponentialJitterBackoff
from aretry.backoff.strategy import (
    BackoffStrategy,
    DelayStrategy,
    calculate_delay,
    resolve_backoff_strategy,
)
