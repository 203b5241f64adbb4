r"""Shared test helpers for the retry engine tests."""

from __future__ import annotations

__all__ = ["FlakyOperation", "TransientError"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aretry.cancellation import CancellationToken


class TransientError(Exception):
    """Error raised by the fake operations of the test suite."""


class FlakyOperation:
    """Operation that fails a fixed number of times, then returns a
    value.

    Args:
        failures: The number of calls that raise ``TransientError``.
        value: The value returned once the failures are used up.
    """

    def __init__(self, failures: int, value: object = 42) -> None:
        self.failures = failures
        self.value = value
        self.calls = 0

    def __call__(self, token: CancellationToken) -> object:
        self.calls += 1
        if self.calls <= self.failures:
            msg = f"failure {self.calls}"
            raise TransientError(msg)
        return self.value
