r"""Parameter normalization utilities for the retry engine.

The engine never rejects its attempt count or base delay: out-of-range
values are coerced to safe values so a misconfigured policy still runs
the operation at least once.
"""

from __future__ import annotations

__all__ = ["DEFAULT_BASE_DELAY", "normalize_base_delay", "normalize_max_attempts"]

import logging

logger: logging.Logger = logging.getLogger(__name__)

# Delay in seconds used when no (or a negative) base delay is configured
DEFAULT_BASE_DELAY = 0.2


def normalize_max_attempts(max_attempts: int) -> int:
    """Coerce the maximum number of attempts to at least 1.

    Args:
        max_attempts: The configured maximum number of attempts.

    Returns:
        ``max_attempts`` if it is >= 1, otherwise 1.

    Example:
        ```pycon
        >>> from aretry.utils.validation import normalize_max_attempts
        >>> normalize_max_attempts(5)
        5
        >>> normalize_max_attempts(0)
        1

        ```
    """
    if max_attempts < 1:
        logger.debug(f"max_attempts={max_attempts} is lower than 1, using 1")
        return 1
    return max_attempts


def normalize_base_delay(base_delay: float | None) -> float:
    """Coerce the base delay to a non-negative value.

    Args:
        base_delay: The configured base delay in seconds, or None.

    Returns:
        ``base_delay`` if it is >= 0, otherwise ``DEFAULT_BASE_DELAY``.

    Example:
        ```pycon
        >>> from aretry.utils.validation import normalize_base_delay
        >>> normalize_base_delay(1.5)
        1.5
        >>> normalize_base_delay(None)
        0.2
        >>> normalize_base_delay(-1.0)
        0.2

        ```
    """
    if base_delay is None:
        return DEFAULT_BASE_DELAY
    if base_delay < 0:
        logger.debug(f"base_delay={base_delay} is negative, using {DEFAULT_BASE_DELAY}")
        return DEFAULT_BASE_DELAY
    return base_delay
