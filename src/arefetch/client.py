r"""Asynchronous context manager client for HTTP requests with retry.

This module provides an async context manager-based client for making
multiple HTTP requests with shared retry options. The
``AsyncRetryClient`` manages the underlying ``httpx.AsyncClient``
lifecycle and provides convenient methods for all HTTP methods.
"""

from __future__ import annotations

__all__ = ["AsyncRetryClient"]

from collections.abc import Mapping
from dataclasses import fields
from typing import TYPE_CHECKING, Any

import httpx

from arefetch.config import DEFAULT_HTTP_TIMEOUT
from arefetch.engine import RetryEngine
from arefetch.options import RetryOptions
from arefetch.transport import HttpxTransport

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self


class AsyncRetryClient:
    r"""Asynchronous context manager for HTTP requests with retry.

    Args:
        retry_options: Default retry options applied to every request.
            Per-request options are merged on top of them. An
            ``errorSink`` given here is shared by all requests.
        timeout: Maximum seconds to wait for server responses. Must be > 0.
        transport: Optional httpx transport of the underlying client, e.g.
            ``httpx.MockTransport`` in tests.

    Raises:
        ValueError: If timeout is non-positive.

    Example:
        ```pycon
        >>> import asyncio
        >>> from arefetch import AsyncRetryClient
        >>> async def main():  # doctest: +SKIP
        ...     async with AsyncRetryClient({"maxRetries": 5}) as client:
        ...         response1 = await client.get("https://api.example.com/data1")
        ...         response2 = await client.post(
        ...             "https://api.example.com/data2",
        ...             json={"key": "value"},
        ...             retry_options={"acceptStatusCodes": [200, 201]},
        ...         )
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        retry_options: RetryOptions | Mapping[str, Any] | None = None,
        *,
        timeout: float | httpx.Timeout = DEFAULT_HTTP_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if isinstance(timeout, (int, float)) and timeout <= 0:
            msg = f"timeout must be > 0, got {timeout}"
            raise ValueError(msg)
        self._timeout = timeout
        self._transport = transport

        if isinstance(retry_options, RetryOptions):
            retry_options = {f.name: getattr(retry_options, f.name) for f in fields(retry_options)}
        self._retry_options: dict[str, Any] = (
            dict(retry_options) if isinstance(retry_options, Mapping) else {}
        )

        # Client will be created when entering context
        self._client: httpx.AsyncClient | None = None
        self._engine: RetryEngine | None = None

    async def __aenter__(self) -> Self:
        """Enter the async context manager and create the underlying
        httpx client.

        Returns:
            The AsyncRetryClient instance for making requests.
        """
        self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        self._engine = RetryEngine(HttpxTransport(self._client))
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the async context manager and close the underlying httpx
        client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._engine = None

    def _ensure_engine(self) -> RetryEngine:
        if self._engine is None:
            msg = "AsyncRetryClient must be used within an async context manager (async with statement)"
            raise RuntimeError(msg)
        return self._engine

    def _merge(
        self, retry_options: RetryOptions | Mapping[str, Any] | None
    ) -> RetryOptions | dict[str, Any]:
        if isinstance(retry_options, RetryOptions):
            return retry_options
        merged = dict(self._retry_options)
        if isinstance(retry_options, Mapping):
            merged.update(retry_options)
        return merged

    async def fetch(
        self,
        url: str,
        options: Mapping[str, Any] | None = None,
        retry_options: RetryOptions | Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        r"""Send a request described by an options mapping.

        Args:
            url: The URL to send the request to.
            options: Keyword arguments of ``httpx.AsyncClient.request``
                plus an optional ``method``.
            retry_options: Per-request retry options.

        Returns:
            An httpx.Response object with an accepted status code.

        Raises:
            RuntimeError: If called outside of a context manager.
            FetchWithRetryError: If the final attempt received a response
                that is not accepted.
            AbortError: If the final attempt timed out.
        """
        engine = self._ensure_engine()
        return await engine.run(url, options, self._merge(retry_options))

    async def request(
        self,
        method: str,
        url: str,
        *,
        retry_options: RetryOptions | Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        r"""Send an HTTP request with automatic retry logic.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, PATCH, HEAD, OPTIONS, etc.).
            url: The URL to send the request to.
            retry_options: Per-request retry options.
            **kwargs: Additional keyword arguments passed to
                ``httpx.AsyncClient.request()``.

        Returns:
            An httpx.Response object with an accepted status code.
        """
        return await self.fetch(url, {"method": method, **kwargs}, retry_options)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        r"""Send an HTTP GET request with automatic retry logic."""
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        r"""Send an HTTP POST request with automatic retry logic."""
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        r"""Send an HTTP PUT request with automatic retry logic."""
        return await self.request("PUT", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        r"""Send an HTTP DELETE request with automatic retry logic."""
        return await self.request("DELETE", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        r"""Send an HTTP PATCH request with automatic retry logic."""
        return await self.request("PATCH", url, **kwargs)

    async def head(self, url: str, **kwargs: Any) -> httpx.Response:
        r"""Send an HTTP HEAD request with automatic retry logic."""
        return await self.request("HEAD", url, **kwargs)

    async def options(self, url: str, **kwargs: Any) -> httpx.Response:
        r"""Send an HTTP OPTIONS request with automatic retry logic."""
        return await self.request("OPTIONS", url, **kwargs)
