r"""Retry package implementing class-based composition pattern.

This package provides the retry execution engine using composition and
strategy patterns for improved maintainability and testability.

Public API:
    - RetryConfig: Configuration for retry behavior
    - CallbackConfig: Configuration for lifecycle hooks
    - RetryContext: Snapshot passed to lifecycle hooks
    - RetryResult: Terminal outcome of a retry call
    - RetryOutcome: Terminal states of a retry call
    - RetryStrategy: Strategy for calculating retry delays
    - RetryDecider: Logic for deciding whether to retry
    - CallbackManager: Manager for hook invocations
    - RetryExecutor: Synchronous retry executor
    - AsyncRetryExecutor: Asynchronous retry executor
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "AsyncRetryExecutor",
    "CallbackConfig",
    "CallbackManager",
    "RetryConfig",
    "RetryContext",
    "RetryDecider",
    "RetryExecutor",
    "RetryOutcome",
    "RetryResult",
    "RetryStrategy",
]

from aretry.retry.config import DEFAULT_MAX_ATTEMPTS, CallbackConfig, RetryConfig
from aretry.retry.context import RetryContext, RetryOutcome, RetryResult
from aretry.retry.decider import RetryDecider
from aretry.retry.executor import RetryExecutor
from aretry.retry.executor_async import AsyncRetryExecutor
from aretry.retry.manager import CallbackManager
from aretry.retry.strategy import RetryStrategy
