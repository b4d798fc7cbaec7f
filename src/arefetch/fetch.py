r"""Contains the asynchronous HTTP request with automatic retry logic."""

from __future__ import annotations

__all__ = ["fetch_with_retry"]

from typing import TYPE_CHECKING, Any

from arefetch.engine import RetryEngine

if TYPE_CHECKING:
    from collections.abc import Mapping

    import httpx

    from arefetch.options import RetryOptions
    from arefetch.transport import Transport


async def fetch_with_retry(
    url: str,
    options: Mapping[str, Any] | None = None,
    retry_options: RetryOptions | Mapping[str, Any] | None = None,
    *,
    transport: Transport | None = None,
) -> httpx.Response:
    r"""Send an HTTP request with automatic retry logic.

    Every attempt is aborted after ``signalTimeout`` milliseconds. A
    response whose status is in ``acceptStatusCodes`` is returned right
    away. Other responses, aborted attempts and transport errors are
    appended to ``errorSink`` and retried after ``retryTimeout``
    milliseconds, up to ``maxRetries`` attempts. When
    ``retryStatusCodes`` is non-empty, a status outside it stops the
    retries immediately.

    Args:
        url: The URL to send the request to.
        options: Request options passed to the transport. With the
            default transport these are keyword arguments of
            ``httpx.AsyncClient.request`` plus an optional ``method``.
        retry_options: Retry options with the keys ``maxRetries``,
            ``signalTimeout``, ``retryTimeout``, ``acceptStatusCodes``,
            ``retryStatusCodes`` and ``errorSink``, or a ``RetryOptions``.
        transport: Optional transport. Defaults to an ``HttpxTransport``.

    Returns:
        An httpx.Response object with an accepted status code.

    Raises:
        FetchWithRetryError: If the final attempt received a response
            that is not accepted.
        AbortError: If the final attempt timed out.

    Example:
        ```pycon
        >>> import asyncio
        >>> from arefetch import fetch_with_retry
        >>> errors = []
        >>> response = asyncio.run(
        ...     fetch_with_retry(
        ...         "https://api.example.com/data",
        ...         {"method": "GET", "headers": {"Accept": "application/json"}},
        ...         {"maxRetries": 5, "retryStatusCodes": [503, 408], "errorSink": errors},
        ...     )
        ... )  # doctest: +SKIP

        ```
    """
    engine = RetryEngine(transport)
    return await engine.run(url, options, retry_options)
