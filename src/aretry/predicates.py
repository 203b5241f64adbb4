r"""Ready-made retry predicates.

A retry predicate receives the exception raised by a failed attempt and
returns True if the attempt should be retried. The predicates in this
module cover exception-type filtering and transient ``httpx`` failures.

Example:
    ```pycon
    >>> import httpx
    >>> from aretry import execute
    >>> from aretry.predicates import is_transient_http_error
    >>> def fetch(token):
    ...     with httpx.Client(timeout=10.0) as client:
    ...         response = client.get("https://api.example.com/data")
    ...         response.raise_for_status()
    ...         return response.json()
    ...
    >>> result = execute(fetch, should_retry=is_transient_http_error)  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "RETRY_STATUS_CODES",
    "is_transient_http_error",
    "retry_on_exception_types",
    "retry_unless_exception_types",
]

from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import Callable

# HTTP status codes that indicate a transient server-side condition
# 429: Too Many Requests - Rate limiting
# 500: Internal Server Error - Temporary server issue
# 502: Bad Gateway - Upstream server error
# 503: Service Unavailable - Server overloaded or down
# 504: Gateway Timeout - Upstream server timeout
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)


def _check_exception_types(exception_types: tuple[type[BaseException], ...]) -> None:
    if not exception_types:
        msg = "at least one exception type is required"
        raise ValueError(msg)
    for exception_type in exception_types:
        if not (isinstance(exception_type, type) and issubclass(exception_type, BaseException)):
            msg = f"expected an exception type, got {exception_type!r}"
            raise TypeError(msg)


def retry_on_exception_types(
    *exception_types: type[BaseException],
) -> Callable[[Exception], bool]:
    """Create a predicate that retries only the given exception types
    and their subclasses.

    Args:
        *exception_types: The exception types to retry.

    Returns:
        The retry predicate.

    Raises:
        ValueError: If no exception type is given.
        TypeError: If an argument is not an exception type.

    Example:
        ```pycon
        >>> from aretry.predicates import retry_on_exception_types
        >>> predicate = retry_on_exception_types(TimeoutError, ConnectionError)
        >>> predicate(ConnectionResetError()), predicate(ValueError())
        (True, False)

        ```
    """
    _check_exception_types(exception_types)

    def predicate(exception: Exception) -> bool:
        return isinstance(exception, exception_types)

    return predicate


def retry_unless_exception_types(
    *exception_types: type[BaseException],
) -> Callable[[Exception], bool]:
    """Create a predicate that retries every exception except the given
    types and their subclasses.

    Args:
        *exception_types: The exception types that are never retried.

    Returns:
        The retry predicate.

    Raises:
        ValueError: If no exception type is given.
        TypeError: If an argument is not an exception type.

    Example:
        ```pycon
        >>> from aretry.predicates import retry_unless_exception_types
        >>> predicate = retry_unless_exception_types(PermissionError)
        >>> predicate(PermissionError()), predicate(TimeoutError())
        (False, True)

        ```
    """
    _check_exception_types(exception_types)

    def predicate(exception: Exception) -> bool:
        return not isinstance(exception, exception_types)

    return predicate


def is_transient_http_error(exception: Exception) -> bool:
    """Determine if an ``httpx`` exception is worth retrying.

    Transient errors are timeouts, transport-level errors (connection
    refused, reset, DNS failures, ...), and HTTP status errors whose
    status code is in ``RETRY_STATUS_CODES``.

    Args:
        exception: The exception raised by the failed attempt.

    Returns:
        True if the exception is a transient HTTP failure.

    Example:
        ```pycon
        >>> import httpx
        >>> from aretry.predicates import is_transient_http_error
        >>> request = httpx.Request("GET", "https://api.example.com/data")
        >>> is_transient_http_error(httpx.ConnectTimeout("timed out", request=request))
        True
        >>> response = httpx.Response(404, request=request)
        >>> is_transient_http_error(
        ...     httpx.HTTPStatusError("not found", request=request, response=response)
        ... )
        False

        ```
    """
    if isinstance(exception, httpx.HTTPStatusError):
        return exception.response.status_code in RETRY_STATUS_CODES
    return isinstance(exception, (httpx.TimeoutException, httpx.TransportError))
