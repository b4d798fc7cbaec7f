r"""Unit tests for the httpx transport."""

from __future__ import annotations

from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from arefetch.abort import AbortSignal
from arefetch.transport import HttpxTransport

URL = "https://example.com/resource"


@pytest.fixture
def mock_response() -> httpx.Response:
    return Mock(spec=httpx.Response, status_code=200)


@pytest.fixture
def mock_client(mock_response: httpx.Response) -> httpx.AsyncClient:
    return Mock(spec=httpx.AsyncClient, request=AsyncMock(return_value=mock_response))


@pytest.mark.asyncio
async def test_httpx_transport_default_method(
    mock_client: httpx.AsyncClient, mock_response: httpx.Response
) -> None:
    """Test that GET is used when the options do not set a method."""
    response = await HttpxTransport(mock_client)(URL, {}, AbortSignal())
    assert response is mock_response
    mock_client.request.assert_awaited_once_with("GET", URL)


@pytest.mark.asyncio
async def test_httpx_transport_none_options(mock_client: httpx.AsyncClient) -> None:
    await HttpxTransport(mock_client)(URL, None, AbortSignal())
    mock_client.request.assert_awaited_once_with("GET", URL)


@pytest.mark.asyncio
async def test_httpx_transport_method_and_kwargs(mock_client: httpx.AsyncClient) -> None:
    """Test that the method is upper-cased and the other options are
    passed as keyword arguments."""
    options = {"method": "post", "json": {"key": "value"}, "headers": {"X-Test": "1"}}

    await HttpxTransport(mock_client)(URL, options, AbortSignal())

    mock_client.request.assert_awaited_once_with(
        "POST", URL, json={"key": "value"}, headers={"X-Test": "1"}
    )


@pytest.mark.asyncio
async def test_httpx_transport_does_not_modify_options(mock_client: httpx.AsyncClient) -> None:
    options = {"method": "PUT", "content": b"data"}
    await HttpxTransport(mock_client)(URL, options, AbortSignal())
    assert options == {"method": "PUT", "content": b"data"}


@pytest.mark.asyncio
async def test_httpx_transport_without_client(mock_response: httpx.Response) -> None:
    """Test that a client is created for the request when none is
    given."""
    with patch(
        "httpx.AsyncClient.request", new_callable=AsyncMock, return_value=mock_response
    ) as request:
        response = await HttpxTransport(timeout=5.0)(URL, {"method": "DELETE"}, AbortSignal())

    assert response is mock_response
    request.assert_awaited_once_with("DELETE", URL)


@pytest.mark.asyncio
async def test_httpx_transport_propagates_errors(mock_client: httpx.AsyncClient) -> None:
    mock_client.request.side_effect = httpx.ConnectError("connection refused")
    with pytest.raises(httpx.ConnectError, match="connection refused"):
        await HttpxTransport(mock_client)(URL, {}, AbortSignal())


@pytest.mark.parametrize("timeout", [0, -1, 0.0])
def test_httpx_transport_invalid_timeout(timeout: float) -> None:
    with pytest.raises(ValueError, match="timeout must be > 0"):
        HttpxTransport(timeout=timeout)


def test_httpx_transport_timeout_object() -> None:
    HttpxTransport(timeout=httpx.Timeout(5.0))
