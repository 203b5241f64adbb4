r"""Structured logging utilities for machine-readable log output.

The retry engine attaches fields such as ``attempt``, ``delay`` and
``elapsed_time`` to its log records. With the opt-in
``StructuredFormatter`` these fields end up as keys of a JSON object,
ready for log aggregation systems.

Example:
    Enable structured logging for aretry:

    ```python
    import logging
    from aretry.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())

    logger = logging.getLogger("aretry")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    ```

    Tag every record emitted while retrying one job:

    ```python
    from aretry import execute
    from aretry.utils.structured_logging import correlation_id

    with correlation_id("job-123"):
        result = execute(fetch_report)
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "correlation_id",
    "get_correlation_id",
    "log_structured",
    "set_correlation_id",
]

import contextvars
import json
import logging
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "aretry_correlation_id", default=None
)

# Attributes every LogRecord has; anything else was passed through ``extra``
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


def get_correlation_id() -> str | None:
    """Get the correlation ID of the current context.

    Returns:
        The current correlation ID, or None if not set.
    """
    return _correlation_id.get()


def set_correlation_id(value: str) -> None:
    """Set the correlation ID for the current context.

    The value is stored in a context variable, so it is isolated
    between threads and asyncio tasks.

    Args:
        value: The correlation ID (e.g. job ID, trace ID).

    Example:
        ```pycon
        >>> from aretry.utils.structured_logging import (
        ...     clear_correlation_id,
        ...     get_correlation_id,
        ...     set_correlation_id,
        ... )
        >>> set_correlation_id("job-456")
        >>> get_correlation_id()
        'job-456'
        >>> clear_correlation_id()

        ```
    """
    _correlation_id.set(value)


def clear_correlation_id() -> None:
    """Clear the correlation ID of the current context."""
    _correlation_id.set(None)


@contextmanager
def correlation_id(value: str) -> Iterator[None]:
    """Set the correlation ID for the duration of a ``with`` block.

    The previous value is restored on exit.

    Args:
        value: The correlation ID.

    Example:
        ```pycon
        >>> from aretry.utils.structured_logging import correlation_id, get_correlation_id
        >>> with correlation_id("job-789"):
        ...     get_correlation_id()
        ...
        'job-789'
        >>> get_correlation_id() is None
        True

        ```
    """
    token = _correlation_id.set(value)
    try:
        yield
    finally:
        _correlation_id.reset(token)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Each record becomes one JSON object with the keys ``timestamp``
    (ISO 8601, UTC), ``level``, ``logger``, ``message``, ``module``,
    ``function`` and ``line``, plus ``correlation_id`` when one is set,
    ``exception`` when the record carries exception info, and every
    field passed through ``extra``. Values that are not JSON
    serializable are rendered with ``str``.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from aretry.utils.structured_logging import StructuredFormatter
        >>> record = logging.LogRecord("aretry", logging.INFO, "x.py", 1, "Retrying", None, None)
        >>> record.attempt = 2
        >>> data = json.loads(StructuredFormatter().format(record))
        >>> data["message"], data["attempt"]
        ('Retrying', 2)

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        current_id = get_correlation_id()
        if current_id is not None:
            log_data["correlation_id"] = current_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data.update(
            {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES}
        )
        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def log_structured(
    logger: logging.Logger,
    level: int,
    message: str,
    **extra: Any,
) -> None:
    """Log a message with structured fields.

    The fields are attached to the record through ``extra``, so they
    appear as JSON keys with ``StructuredFormatter`` and are available
    to any other handler as record attributes.

    Args:
        logger: Logger to use.
        level: Log level (e.g., logging.INFO).
        message: Log message.
        **extra: Additional structured fields to include in the log.
    """
    if logger.isEnabledFor(level):
        logger.log(level, message, extra=extra, stacklevel=2)
