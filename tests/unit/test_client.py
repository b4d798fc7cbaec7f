r"""Unit tests for AsyncRetryClient."""

from __future__ import annotations

from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from arefetch import AsyncRetryClient
from arefetch.engine import RetryEngine
from arefetch.options import RetryOptions

URL = "https://example.com/resource"


def test_async_retry_client_invalid_timeout() -> None:
    with pytest.raises(ValueError, match="timeout must be > 0, got 0"):
        AsyncRetryClient(timeout=0)


@pytest.mark.asyncio
async def test_async_retry_client_outside_context_manager() -> None:
    """Test that requests outside the context manager raise."""
    client = AsyncRetryClient()
    with pytest.raises(RuntimeError, match="must be used within an async context manager"):
        await client.get(URL)


@pytest.mark.asyncio
async def test_async_retry_client_closes_underlying_client() -> None:
    async with AsyncRetryClient() as client:
        underlying = client._client
        assert isinstance(underlying, httpx.AsyncClient)
        assert not underlying.is_closed
    assert underlying.is_closed
    assert client._client is None
    with pytest.raises(RuntimeError):
        await client.fetch(URL)


@pytest.mark.asyncio
async def test_async_retry_client_merges_retry_options() -> None:
    """Test that per-request options are merged on top of the client
    defaults."""
    response = Mock(spec=httpx.Response, status_code=200)
    with patch.object(RetryEngine, "run", new_callable=AsyncMock, return_value=response) as run:
        async with AsyncRetryClient({"maxRetries": 5, "signalTimeout": 50}) as client:
            result = await client.fetch(URL, {"method": "GET"}, {"maxRetries": 2})

    assert result is response
    run.assert_awaited_once_with(
        URL, {"method": "GET"}, {"maxRetries": 2, "signalTimeout": 50}
    )


@pytest.mark.asyncio
async def test_async_retry_client_retry_options_instance_overrides_defaults() -> None:
    options = RetryOptions(max_retries=7)
    with patch.object(RetryEngine, "run", new_callable=AsyncMock) as run:
        async with AsyncRetryClient({"maxRetries": 5}) as client:
            await client.fetch(URL, retry_options=options)

    assert run.await_args.args[2] is options


@pytest.mark.asyncio
async def test_async_retry_client_default_retry_options_instance() -> None:
    errors = []
    with patch.object(RetryEngine, "run", new_callable=AsyncMock) as run:
        async with AsyncRetryClient(RetryOptions(max_retries=4, error_sink=errors)) as client:
            await client.get(URL)

    merged = run.await_args.args[2]
    assert merged["max_retries"] == 4
    assert merged["error_sink"] is errors


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("name", "method"),
    [
        ("get", "GET"),
        ("post", "POST"),
        ("put", "PUT"),
        ("delete", "DELETE"),
        ("patch", "PATCH"),
        ("head", "HEAD"),
        ("options", "OPTIONS"),
    ],
)
async def test_async_retry_client_http_methods(name: str, method: str) -> None:
    """Test that each HTTP method helper sets the method option."""
    with patch.object(RetryEngine, "run", new_callable=AsyncMock) as run:
        async with AsyncRetryClient() as client:
            await getattr(client, name)(
                URL, headers={"X-Test": "1"}, retry_options={"maxRetries": 1}
            )

    run.assert_awaited_once_with(
        URL, {"method": method, "headers": {"X-Test": "1"}}, {"maxRetries": 1}
    )
