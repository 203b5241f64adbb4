r"""Unit tests for BaseBackoffStrategy."""

from __future__ import annotations

import pytest

from aretry.backoff.base import BaseBackoffStrategy


def test_base_backoff_strategy_is_abstract() -> None:
    """Test that BaseBackoffStrategy cannot be instantiated."""
    with pytest.raises(TypeError):
        BaseBackoffStrategy()


def test_base_backoff_strategy_subclass() -> None:
    """Test that a subclass implementing calculate can be used."""

    class HalfSecondBackoff(BaseBackoffStrategy):
        def calculate(self, attempt: int) -> float:  # noqa: ARG002
            return 0.5

    assert HalfSecondBackoff().calculate(3) == 0.5
