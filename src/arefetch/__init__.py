r"""arefetch - Asynchronous HTTP requests with retry and per-attempt timeout.

This package sends an HTTP request, classifies the response status
against configurable accept and retry status codes and retries with a
fixed delay between attempts, aborting every attempt that exceeds a
per-attempt timeout. Built on top of the httpx library.

Key Features:
    - Accept status codes ending the retry loop successfully
    - Retry status codes, or "retry anything not accepted" by default
    - Per-attempt timeout aborting slow requests
    - Fixed delay between attempts, bounded number of attempts
    - Every failed attempt recorded in a caller-owned error sink
    - Lenient option parsing: invalid values fall back to defaults
    - Context manager API for managing request sessions

Example:
    ```pycon
    >>> from arefetch import fetch_with_retry
    >>> errors = []
    >>> response = await fetch_with_retry(
    ...     "https://api.example.com/data",
    ...     {"method": "GET"},
    ...     {"maxRetries": 5, "retryStatusCodes": [503, 408], "errorSink": errors},
    ... )  # doctest: +SKIP
    >>> from arefetch import AsyncRetryClient
    >>> async with AsyncRetryClient({"maxRetries": 5}) as client:  # doctest: +SKIP
    ...     response = await client.get("https://api.example.com/data")
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "AbortError",
    "AbortSignal",
    "AsyncRetryClient",
    "FetchError",
    "FetchWithRetryError",
    "HttpxTransport",
    "RetryEngine",
    "RetryOptions",
    "SignalTimeoutContext",
    "__version__",
    "fetch_with_retry",
    "normalize",
]

from importlib.metadata import PackageNotFoundError, version

from arefetch.abort import AbortSignal, SignalTimeoutContext
from arefetch.client import AsyncRetryClient
from arefetch.engine import RetryEngine
from arefetch.exceptions import AbortError, FetchError, FetchWithRetryError
from arefetch.fetch import fetch_with_retry
from arefetch.options import RetryOptions, normalize
from arefetch.transport import HttpxTransport

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
