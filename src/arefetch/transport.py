r"""HTTP transports used by the retry engine.

A transport is any async callable ``(url, options, signal)`` returning
an ``httpx.Response``. The retry engine owns the signal and races the
transport call against it, so a transport only has to issue the
request. ``HttpxTransport`` is the default implementation.
"""

from __future__ import annotations

__all__ = ["HttpxTransport", "Transport"]

import logging
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from arefetch.config import DEFAULT_HTTP_TIMEOUT, DEFAULT_METHOD

if TYPE_CHECKING:
    from collections.abc import Mapping

    from arefetch.abort import AbortSignal

logger: logging.Logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Callable issuing one HTTP request."""

    async def __call__(
        self, url: str, options: Mapping[str, Any], signal: AbortSignal
    ) -> httpx.Response: ...


class HttpxTransport:
    r"""Transport issuing requests with an ``httpx.AsyncClient``.

    The request options are passed as keyword arguments to
    ``httpx.AsyncClient.request``. The optional ``method`` key selects
    the HTTP method and defaults to ``GET``. The options mapping is never
    modified.

    Args:
        client: An optional ``httpx.AsyncClient``. If ``None``, a new
            client is created and closed for every request.
        timeout: Maximum seconds to wait for the server response. Only
            used if client is ``None``. Must be > 0.

    Raises:
        ValueError: If timeout is non-positive.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from arefetch.transport import HttpxTransport
        >>> async def main():
        ...     async with httpx.AsyncClient() as client:
        ...         transport = HttpxTransport(client)
        ...         return await transport("https://api.example.com/data", {}, None)
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float | httpx.Timeout = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        if isinstance(timeout, (int, float)) and timeout <= 0:
            msg = f"timeout must be > 0, got {timeout}"
            raise ValueError(msg)
        self._client = client
        self._timeout = timeout

    async def __call__(
        self,
        url: str,
        options: Mapping[str, Any] | None = None,
        signal: AbortSignal | None = None,  # noqa: ARG002
    ) -> httpx.Response:
        kwargs = dict(options or {})
        method = str(kwargs.pop("method", DEFAULT_METHOD)).upper()
        logger.debug(f"Sending {method} request to {url}")
        if self._client is not None:
            return await self._client.request(method, url, **kwargs)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.request(method, url, **kwargs)
