r"""Configuration dataclasses for retry behavior.

This module provides configuration objects for the retry loop and its
lifecycle hooks.
"""

from __future__ import annotations

__all__ = ["DEFAULT_MAX_ATTEMPTS", "CallbackConfig", "RetryConfig"]

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from aretry.backoff.strategy import DelayStrategy
from aretry.utils.validation import normalize_base_delay, normalize_max_attempts

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.backoff.strategy import BackoffStrategy
    from aretry.callbacks import Hook

# Default maximum number of attempts, including the first one
DEFAULT_MAX_ATTEMPTS = 3


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior.

    Out-of-range values are coerced rather than rejected:
    ``max_attempts`` lower than 1 becomes 1, and a missing or negative
    ``base_delay`` becomes 0.2 seconds.

    Attributes:
        max_attempts: Maximum number of attempts, including the first.
        base_delay: Base delay in seconds fed into the delay strategy.
        strategy: Built-in ``DelayStrategy`` or a custom backoff
            strategy instance.
        should_retry: Optional predicate deciding whether an error is
            worth retrying. If None, every error is retried.
        total_timeout: Optional total time budget in seconds for the
            whole call, delays included.

    Example:
        ```pycon
        >>> from aretry.retry import RetryConfig
        >>> config = RetryConfig(max_attempts=0, base_delay=-1.0)
        >>> config.max_attempts, config.base_delay
        (1, 0.2)
        >>> config.merge(max_attempts=5).max_attempts
        5

        ```
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay: float | None = None
    strategy: BackoffStrategy = DelayStrategy.FIXED
    should_retry: Callable[[Exception], bool] | None = None
    total_timeout: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "max_attempts", normalize_max_attempts(self.max_attempts))
        object.__setattr__(self, "base_delay", normalize_base_delay(self.base_delay))

    def merge(self, **kwargs: Any) -> RetryConfig:
        """Return a copy of the configuration with some fields replaced.

        Args:
            **kwargs: The fields to replace.

        Returns:
            The new configuration. The original is unchanged.
        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class CallbackConfig:
    """Configuration for lifecycle hooks.

    Attributes:
        on_retry: Optional hook invoked after each failed attempt that
            will be retried, before the delay.
        on_success: Optional hook invoked when an attempt succeeds.
        on_failure: Optional hook invoked when the retry sequence fails
            because attempts ran out or the error was not retryable.
    """

    on_retry: Hook | None = None
    on_success: Hook | None = None
    on_failure: Hook | None = None
