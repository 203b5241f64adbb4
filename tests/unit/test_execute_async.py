from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from aretry import (
    CancellationReason,
    CancellationToken,
    DelayStrategy,
    RetryCancelledError,
    RetryFailedError,
    RetryOutcome,
    execute_async,
    run_async,
)
from tests.helpers import TransientError

###################################
#     Tests for execute_async     #
###################################


@pytest.mark.asyncio
async def test_execute_async_success(mock_async_operation: AsyncMock) -> None:
    result = await execute_async(mock_async_operation)
    assert result.succeeded
    assert result.value == 42
    assert result.attempts == 1


@pytest.mark.asyncio
async def test_execute_async_retries(
    mock_wait_async: list[float], transient_error: TransientError
) -> None:
    operation = AsyncMock(side_effect=[transient_error, transient_error, 42])
    result = await execute_async(
        operation, max_attempts=5, base_delay=0.1, strategy=DelayStrategy.EXPONENTIAL
    )
    assert result.value == 42
    assert result.attempts == 3
    assert mock_wait_async == pytest.approx([0.1, 0.2])


@pytest.mark.asyncio
async def test_execute_async_exhausted(transient_error: TransientError) -> None:
    result = await execute_async(
        AsyncMock(side_effect=transient_error), max_attempts=2, base_delay=0.0
    )
    assert result.outcome is RetryOutcome.FAILED_EXHAUSTED
    assert "2 attempt(s)" in str(result.error)


@pytest.mark.asyncio
async def test_execute_async_total_timeout() -> None:
    async def operation(token: CancellationToken) -> None:
        await asyncio.sleep(10)

    result = await execute_async(operation, total_timeout=0.05)
    assert result.attempts == 1
    assert result.error.reason is CancellationReason.TIMEOUT


@pytest.mark.asyncio
async def test_execute_async_token_from_another_thread(token: CancellationToken) -> None:
    async def operation(effective: CancellationToken) -> None:
        await asyncio.sleep(10)

    loop = asyncio.get_running_loop()
    loop.call_later(0.02, lambda: loop.run_in_executor(None, token.cancel))
    result = await execute_async(operation, cancellation_token=token)
    assert result.error.reason is CancellationReason.CANCELLED


@pytest.mark.asyncio
async def test_execute_async_hooks(transient_error: TransientError) -> None:
    on_retry = AsyncMock()
    on_success = Mock()
    await execute_async(
        AsyncMock(side_effect=[transient_error, 1]),
        base_delay=0.0,
        on_retry=on_retry,
        on_success=on_success,
    )
    on_retry.assert_awaited_once()
    on_success.assert_called_once()


###############################
#     Tests for run_async     #
###############################


@pytest.mark.asyncio
async def test_run_async_success() -> None:
    operation = AsyncMock(return_value="ignored")
    assert await run_async(operation) is None
    operation.assert_awaited_once()


@pytest.mark.asyncio
async def test_run_async_raises_on_failure(transient_error: TransientError) -> None:
    with pytest.raises(RetryFailedError, match="after 2 attempt"):
        await run_async(AsyncMock(side_effect=transient_error), max_attempts=2, base_delay=0.0)


@pytest.mark.asyncio
async def test_run_async_raises_on_cancellation(token: CancellationToken) -> None:
    token.cancel()
    with pytest.raises(RetryCancelledError) as exc_info:
        await run_async(AsyncMock(), cancellation_token=token)
    assert exc_info.value.reason is CancellationReason.CANCELLED
    assert exc_info.value.attempts == 0
