r"""aretry - Retry execution engine for transient-fault handling.

This package runs a fallible operation repeatedly until it succeeds,
exhausts its attempt budget, is filtered out by a retry predicate, or a
cancellation token or total-time budget stops it. It replaces ad-hoc
try/except loops scattered through application code with one reusable
engine.

Key Features:
    - Synchronous and asyncio execution engines sharing the same policy
    - Delay strategies: Fixed, Exponential, Exponential with jitter, or custom
    - Retry predicates, including one for transient httpx failures
    - Cancellation tokens composed with an optional total timeout, with
      the cancellation reason (cancelled or timed out) reported
    - Lifecycle hooks (on_retry, on_success, on_failure) whose errors are
      isolated from the outcome
    - Results instead of exceptions: callers branch on ``succeeded``
    - Fluent ``RetryBuilder`` front door

Example:
    ```pycon
    >>> from aretry import DelayStrategy, execute
    >>> result = execute(
    ...     lambda token: "payload",
    ...     max_attempts=4,
    ...     base_delay=0.5,
    ...     strategy=DelayStrategy.EXPONENTIAL_WITH_JITTER,
    ... )
    >>> result.succeeded, result.value
    (True, 'payload')

    ```
"""

from __future__ import annotations

__all__ = [
    "AsyncRetryExecutor",
    "CallbackConfig",
    "CancellationReason",
    "CancellationToken",
    "DelayStrategy",
    "OperationCancelledError",
    "RetryBuilder",
    "RetryCancelledError",
    "RetryConfig",
    "RetryConfigurationError",
    "RetryContext",
    "RetryExecutor",
    "RetryFailedError",
    "RetryOutcome",
    "RetryResult",
    "__version__",
    "execute",
    "execute_async",
    "run",
    "run_async",
]

from importlib.metadata import PackageNotFoundError, version

from aretry.backoff import DelayStrategy
from aretry.builder import RetryBuilder
from aretry.cancellation import CancellationReason, CancellationToken
from aretry.exceptions import (
    OperationCancelledError,
    RetryCancelledError,
    RetryConfigurationError,
    RetryFailedError,
)
from aretry.execute import execute, run
from aretry.execute_async import execute_async, run_async
from aretry.retry import (
    AsyncRetryExecutor,
    CallbackConfig,
    RetryConfig,
    RetryContext,
    RetryExecutor,
    RetryOutcome,
    RetryResult,
)

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
