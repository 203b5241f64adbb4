from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, Mock, patch

import pytest

from aretry.cancellation import CancellationToken
from tests.helpers import TransientError

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def transient_error() -> TransientError:
    """Create the error raised by failing operations."""
    return TransientError("temporary failure")


@pytest.fixture
def token() -> CancellationToken:
    """Create a fresh external cancellation token."""
    return CancellationToken()


@pytest.fixture
def mock_operation() -> Mock:
    """Create a mock synchronous operation that succeeds with 42."""
    return Mock(return_value=42)


@pytest.fixture
def mock_async_operation() -> AsyncMock:
    """Create a mock async operation that succeeds with 42."""
    return AsyncMock(return_value=42)


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock hook function for testing lifecycle hooks."""
    return Mock()


@pytest.fixture
def mock_wait() -> Generator[list[float], None, None]:
    """Patch the blocking wait of cancellation tokens to make tests run
    faster.

    The patched wait records the requested delays and reports that each
    delay elapsed, unless the token was already cancelled.
    """
    delays: list[float] = []

    def fake_wait(self: CancellationToken, timeout: float | None = None) -> bool:
        delays.append(timeout)
        return self.is_cancelled

    with patch.object(CancellationToken, "wait", fake_wait):
        yield delays


@pytest.fixture
def mock_wait_async() -> Generator[list[float], None, None]:
    """Patch the async wait of cancellation tokens used for delays.

    Only waits with a timeout are short-circuited and recorded; the
    waiter used to race operations against the token (no timeout) keeps
    working.
    """
    delays: list[float] = []
    original = CancellationToken.wait_async

    async def fake_wait_async(self: CancellationToken, timeout: float | None = None) -> bool:
        if timeout is None:
            return await original(self)
        delays.append(timeout)
        return self.is_cancelled

    with patch.object(CancellationToken, "wait_async", fake_wait_async):
        yield delays
