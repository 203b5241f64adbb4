r"""Exponential backoff strategy with symmetric random jitter."""

from __future__ import annotations

__all__ = ["JITTER_RATIO", "MIN_JITTER_DELAY", "ExponentialJitterBackoff"]

import math
import random

from aretry.backoff.exponential import ExponentialBackoff

# Maximum relative perturbation applied to the exponential delay (+/- 20%)
JITTER_RATIO = 0.2

# Smallest delay ever returned by the jitter strategy (one millisecond)
MIN_JITTER_DELAY = 0.001


class ExponentialJitterBackoff(ExponentialBackoff):
    """Exponential backoff strategy with jitter.

    Computes the exponential delay ``base_delay * (2 ** (attempt - 1))``
    and perturbs it by a uniformly distributed factor in
    ``[-jitter_ratio, +jitter_ratio]`` of that value. The result is
    never lower than ``MIN_JITTER_DELAY``.

    Jitter spreads out the retries of many callers that failed at the
    same time, so they do not hit the recovering service in lockstep
    (thundering herd).

    Args:
        base_delay: The delay in seconds after the first failed attempt
            before jitter is applied (default: 0.2).
        jitter_ratio: The maximum relative perturbation (default: 0.2).
        rng: Optional random number generator. If None, the
            process-wide ``random`` module is used.

    Example:
        ```pycon
        >>> import random
        >>> from aretry.backoff import ExponentialJitterBackoff
        >>> backoff = ExponentialJitterBackoff(base_delay=1.0, rng=random.Random(42))
        >>> 1.6 <= backoff.calculate(2) <= 2.4
        True

        ```
    """

    def __init__(
        self,
        base_delay: float = 0.2,
        jitter_ratio: float = JITTER_RATIO,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(base_delay=base_delay)
        if not 0 <= jitter_ratio < 1:
            msg = f"jitter_ratio must be in [0, 1), got {jitter_ratio}"
            raise ValueError(msg)

        self.jitter_ratio = jitter_ratio
        self._rng = rng

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(base_delay={self.base_delay}, "
            f"jitter_ratio={self.jitter_ratio})"
        )

    def calculate(self, attempt: int) -> float:
        delay = super().calculate(attempt)
        if math.isinf(delay):
            return delay
        uniform = self._rng.uniform if self._rng is not None else random.uniform
        jitter = uniform(-self.jitter_ratio, self.jitter_ratio) * delay  # noqa: S311
        return max(MIN_JITTER_DELAY, delay + jitter)
