r"""Unit tests for RetryExecutor."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING
from unittest.mock import Mock, call

import pytest

from aretry.backoff import DelayStrategy
from aretry.cancellation import CancellationReason, CancellationToken
from aretry.exceptions import OperationCancelledError, RetryCancelledError, RetryFailedError
from aretry.retry import CallbackConfig, RetryConfig, RetryExecutor, RetryOutcome
from tests.helpers import FlakyOperation, TransientError

if TYPE_CHECKING:
    from aretry.retry import RetryContext


def test_retry_executor_default_config() -> None:
    executor = RetryExecutor()
    assert executor.config == RetryConfig()
    assert executor.callback_config == CallbackConfig()
    assert executor.decider.max_attempts == 3


def test_retry_executor_success_first_attempt(mock_operation: Mock) -> None:
    result = RetryExecutor(RetryConfig(base_delay=0.0)).execute(mock_operation)
    assert result.succeeded
    assert result.value == 42
    assert result.attempts == 1
    assert result.error is None
    assert result.outcome is RetryOutcome.SUCCEEDED
    assert result.elapsed_time >= result.last_attempt_duration >= 0.0
    mock_operation.assert_called_once()
    assert isinstance(mock_operation.call_args.args[0], CancellationToken)


def test_retry_executor_success_after_retries(
    mock_wait: list[float], transient_error: TransientError
) -> None:
    operation = Mock(side_effect=[transient_error, transient_error, 42])
    on_retry = Mock()
    result = RetryExecutor(
        RetryConfig(max_attempts=5), CallbackConfig(on_retry=on_retry)
    ).execute(operation)
    assert result.succeeded
    assert result.value == 42
    assert result.attempts == 3
    assert [c.args[0].attempt for c in on_retry.call_args_list] == [1, 2]
    assert mock_wait == [0.2, 0.2]


def test_retry_executor_exhausted(mock_wait: list[float], transient_error: TransientError) -> None:
    operation = Mock(side_effect=transient_error)
    result = RetryExecutor(RetryConfig(max_attempts=2)).execute(operation)
    assert not result.succeeded
    assert result.value is None
    assert result.attempts == 2
    assert result.outcome is RetryOutcome.FAILED_EXHAUSTED
    assert type(result.error) is RetryFailedError
    assert "2 attempt(s)" in str(result.error)
    assert result.error.cause is transient_error
    assert result.error.__cause__ is transient_error
    assert operation.call_count == 2
    assert mock_wait == [0.2]


def test_retry_executor_exponential_delays(
    mock_wait: list[float], transient_error: TransientError
) -> None:
    operation = Mock(side_effect=transient_error)
    RetryExecutor(
        RetryConfig(max_attempts=4, base_delay=0.1, strategy=DelayStrategy.EXPONENTIAL)
    ).execute(operation)
    assert mock_wait == pytest.approx([0.1, 0.2, 0.4])


def test_retry_executor_zero_delay_skips_wait(
    mock_wait: list[float], transient_error: TransientError
) -> None:
    operation = Mock(side_effect=[transient_error, 42])
    result = RetryExecutor(RetryConfig(base_delay=0.0)).execute(operation)
    assert result.value == 42
    assert mock_wait == []


@pytest.mark.parametrize("max_attempts", [0, -3])
def test_retry_executor_max_attempts_lower_than_one(
    max_attempts: int, transient_error: TransientError
) -> None:
    operation = Mock(side_effect=transient_error)
    result = RetryExecutor(RetryConfig(max_attempts=max_attempts, base_delay=0.0)).execute(
        operation
    )
    assert result.attempts == 1
    operation.assert_called_once()


def test_retry_executor_predicate_false(transient_error: TransientError) -> None:
    operation = Mock(side_effect=transient_error)
    on_failure = Mock()
    on_retry = Mock()
    result = RetryExecutor(
        RetryConfig(max_attempts=5, base_delay=0.0, should_retry=lambda exc: False),
        CallbackConfig(on_retry=on_retry, on_failure=on_failure),
    ).execute(operation)
    assert result.attempts == 1
    assert result.outcome is RetryOutcome.FAILED_EXHAUSTED
    on_retry.assert_not_called()
    on_failure.assert_called_once()
    assert on_failure.call_args.args[0].last_exception is transient_error


def test_retry_executor_predicate_receives_error(transient_error: TransientError) -> None:
    should_retry = Mock(return_value=True)
    RetryExecutor(
        RetryConfig(max_attempts=3, base_delay=0.0, should_retry=should_retry)
    ).execute(Mock(side_effect=transient_error))
    assert should_retry.call_args_list == [call(transient_error), call(transient_error)]


def test_retry_executor_predicate_error_propagates(transient_error: TransientError) -> None:
    def should_retry(exc: Exception) -> bool:
        msg = "broken predicate"
        raise KeyError(msg)

    with pytest.raises(KeyError, match="broken predicate"):
        RetryExecutor(RetryConfig(base_delay=0.0, should_retry=should_retry)).execute(
            Mock(side_effect=transient_error)
        )


def test_retry_executor_hooks(transient_error: TransientError) -> None:
    manager = Mock()
    operation = Mock(side_effect=[transient_error, "ok"])
    RetryExecutor(
        RetryConfig(base_delay=0.0),
        CallbackConfig(
            on_retry=manager.on_retry, on_success=manager.on_success, on_failure=manager.on_failure
        ),
    ).execute(operation)
    assert [c[0] for c in manager.mock_calls] == ["on_retry", "on_success"]
    retry_context: RetryContext = manager.on_retry.call_args.args[0]
    assert retry_context.attempt == 1
    assert retry_context.last_exception is transient_error
    assert retry_context.delay == 0.0
    success_context: RetryContext = manager.on_success.call_args.args[0]
    assert success_context.attempt == 2
    assert success_context.last_exception is None
    assert success_context.start_time == retry_context.start_time


def test_retry_executor_hook_errors_are_isolated(
    caplog: pytest.LogCaptureFixture, transient_error: TransientError
) -> None:
    broken = Mock(side_effect=RuntimeError("hook failure"))
    operation = Mock(side_effect=[transient_error, transient_error, 7])
    with caplog.at_level(logging.WARNING):
        result = RetryExecutor(
            RetryConfig(base_delay=0.0),
            CallbackConfig(on_retry=broken, on_success=broken),
        ).execute(operation)
    assert result.succeeded
    assert result.value == 7
    assert result.attempts == 3
    assert broken.call_count == 3
    assert "on_retry hook failed for attempt 1" in caplog.text
    assert "on_success hook failed for attempt 3" in caplog.text


def test_retry_executor_cancelled_before_first_attempt(
    token: CancellationToken, mock_operation: Mock
) -> None:
    token.cancel()
    on_failure = Mock()
    result = RetryExecutor(RetryConfig(), CallbackConfig(on_failure=on_failure)).execute(
        mock_operation, cancellation_token=token
    )
    assert result.attempts == 0
    assert result.outcome is RetryOutcome.FAILED_CANCELLED_OR_TIMED_OUT
    assert isinstance(result.error, RetryCancelledError)
    assert result.error.reason is CancellationReason.CANCELLED
    assert result.error.cause is None
    mock_operation.assert_not_called()
    on_failure.assert_not_called()


def test_retry_executor_cancelled_by_on_retry_hook(
    token: CancellationToken, transient_error: TransientError
) -> None:
    operation = Mock(side_effect=transient_error)
    result = RetryExecutor(
        RetryConfig(max_attempts=5, base_delay=0.0),
        CallbackConfig(on_retry=lambda context: token.cancel()),
    ).execute(operation, cancellation_token=token)
    assert result.attempts == 1
    assert result.error.reason is CancellationReason.CANCELLED
    assert result.error.cause is transient_error
    operation.assert_called_once()


def test_retry_executor_cancelled_during_delay(
    mock_wait: list[float], token: CancellationToken, transient_error: TransientError
) -> None:
    result = RetryExecutor(
        RetryConfig(max_attempts=5),
        CallbackConfig(on_retry=lambda context: token.cancel()),
    ).execute(Mock(side_effect=transient_error), cancellation_token=token)
    assert result.attempts == 1
    assert result.outcome is RetryOutcome.FAILED_CANCELLED_OR_TIMED_OUT
    assert mock_wait == [0.2]


def test_retry_executor_operation_observes_token(token: CancellationToken) -> None:
    def operation(effective: CancellationToken) -> int:
        token.cancel()
        effective.raise_if_cancelled()
        return 1

    result = RetryExecutor(RetryConfig(base_delay=0.0, total_timeout=60.0)).execute(
        operation, cancellation_token=token
    )
    assert result.attempts == 1
    assert result.error.reason is CancellationReason.CANCELLED
    assert isinstance(result.error.cause, OperationCancelledError)


def test_retry_executor_flaky_operation() -> None:
    operation = FlakyOperation(failures=2, value="done")
    result = RetryExecutor(RetryConfig(max_attempts=3, base_delay=0.0)).execute(operation)
    assert result.value == "done"
    assert result.attempts == 3
    assert operation.calls == 3


def test_retry_executor_cancellation_signal_with_active_token_is_retried() -> None:
    operation = Mock(side_effect=[OperationCancelledError(), 5])
    result = RetryExecutor(RetryConfig(base_delay=0.0)).execute(operation)
    assert result.succeeded
    assert result.value == 5
    assert result.attempts == 2


def test_retry_executor_total_timeout() -> None:
    def operation(token: CancellationToken) -> None:
        time.sleep(0.03)
        msg = "still failing"
        raise TransientError(msg)

    result = RetryExecutor(
        RetryConfig(max_attempts=100, base_delay=0.0, total_timeout=0.1)
    ).execute(operation)
    assert not result.succeeded
    assert result.outcome is RetryOutcome.FAILED_CANCELLED_OR_TIMED_OUT
    assert result.error.reason is CancellationReason.TIMEOUT
    assert "total timeout of 0.1s exceeded" in str(result.error)
    assert 1 <= result.attempts < 100
    assert result.elapsed_time >= 0.1


def test_retry_executor_total_timeout_interrupts_delay(transient_error: TransientError) -> None:
    start = time.monotonic()
    executor = RetryExecutor(RetryConfig(max_attempts=3, base_delay=10.0, total_timeout=0.05))
    result = executor.execute(Mock(side_effect=transient_error))
    assert time.monotonic() - start < 5.0
    assert result.attempts == 1
    assert result.error.reason is CancellationReason.TIMEOUT


@pytest.mark.parametrize("total_timeout", [0.0, -1.0])
def test_retry_executor_expired_total_timeout(total_timeout: float, mock_operation: Mock) -> None:
    result = RetryExecutor(RetryConfig(total_timeout=total_timeout)).execute(mock_operation)
    assert result.attempts == 0
    assert result.error.reason is CancellationReason.TIMEOUT
    mock_operation.assert_not_called()


def test_retry_executor_coroutine_operation_raises_type_error() -> None:
    async def operation(token: CancellationToken) -> int:
        return 1

    with pytest.raises(TypeError, match="operation returned an awaitable"):
        RetryExecutor(RetryConfig(base_delay=0.0)).execute(operation)


def test_retry_executor_logs_retries(
    caplog: pytest.LogCaptureFixture, transient_error: TransientError
) -> None:
    with caplog.at_level(logging.DEBUG, logger="aretry"):
        RetryExecutor(RetryConfig(max_attempts=2, base_delay=0.0)).execute(
            Mock(side_effect=transient_error)
        )
    assert "Attempt 1 failed, will retry (TransientError)" in caplog.text
    assert "Operation failed after 2 attempt(s)" in caplog.text


def test_retry_executor_exhausted_hooks() -> None:
    errors = [TransientError(f"failure {i}") for i in range(1, 5)]
    on_retry = Mock()
    on_failure = Mock()
    result = RetryExecutor(
        RetryConfig(max_attempts=4, base_delay=0.0),
        CallbackConfig(on_retry=on_retry, on_failure=on_failure),
    ).execute(Mock(side_effect=errors))
    assert result.attempts == 4
    assert result.error.cause is errors[-1]
    assert [c.args[0].attempt for c in on_retry.call_args_list] == [1, 2, 3]
    assert [c.args[0].last_exception for c in on_retry.call_args_list] == errors[:3]
    on_failure.assert_called_once()
    failure_context: RetryContext = on_failure.call_args.args[0]
    assert failure_context.attempt == 4
    assert failure_context.last_exception is errors[-1]
    assert failure_context.delay == 0.0


@pytest.mark.parametrize(
    "strategy", [DelayStrategy.EXPONENTIAL, DelayStrategy.EXPONENTIAL_WITH_JITTER]
)
def test_retry_executor_exponential_many_attempts(
    mock_wait: list[float], strategy: DelayStrategy, transient_error: TransientError
) -> None:
    operation = Mock(side_effect=transient_error)
    result = RetryExecutor(
        RetryConfig(max_attempts=1100, base_delay=0.0, strategy=strategy)
    ).execute(operation)
    assert result.attempts == 1100
    assert result.outcome is RetryOutcome.FAILED_EXHAUSTED
    assert operation.call_count == 1100


def test_retry_executor_asyncio_cancelled_error_with_fired_token(
    token: CancellationToken,
) -> None:
    def operation(effective: CancellationToken) -> None:
        token.cancel()
        raise asyncio.CancelledError

    on_failure = Mock()
    result = RetryExecutor(RetryConfig(), CallbackConfig(on_failure=on_failure)).execute(
        operation, cancellation_token=token
    )
    assert result.attempts == 1
    assert result.outcome is RetryOutcome.FAILED_CANCELLED_OR_TIMED_OUT
    assert result.error.reason is CancellationReason.CANCELLED
    assert isinstance(result.error.cause, OperationCancelledError)
    assert isinstance(result.error.cause.__cause__, asyncio.CancelledError)
    on_failure.assert_not_called()


def test_retry_executor_asyncio_cancelled_error_with_active_token_is_retried() -> None:
    operation = Mock(side_effect=[asyncio.CancelledError(), 5])
    result = RetryExecutor(RetryConfig(base_delay=0.0)).execute(operation)
    assert result.succeeded
    assert result.value == 5
    assert result.attempts == 2


def test_retry_executor_asyncio_run_cancelled_inside_operation() -> None:
    async def cancelled() -> None:
        asyncio.current_task().cancel()
        await asyncio.sleep(1)

    def operation(token: CancellationToken) -> None:
        asyncio.run(cancelled())

    result = RetryExecutor(RetryConfig(max_attempts=2, base_delay=0.0)).execute(operation)
    assert result.attempts == 2
    assert result.outcome is RetryOutcome.FAILED_EXHAUSTED
    assert isinstance(result.error.cause, OperationCancelledError)
