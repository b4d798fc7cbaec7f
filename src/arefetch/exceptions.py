r"""Exceptions raised by the retry engine.

Two kinds of errors are produced by the engine:

- ``AbortError``: an attempt exceeded its per-attempt timeout.
- ``FetchWithRetryError``: a response was received but its status code
  is not accepted.

Any other transport failure (connection refused, DNS failure, ...) is
not wrapped and propagates as-is.
"""

from __future__ import annotations

__all__ = ["AbortError", "FetchError", "FetchWithRetryError"]

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx


class FetchError(Exception):
    """Base class of the errors produced by the retry engine.

    Args:
        message: Human-readable description of the decision taken for
            the attempt.
        url: The requested URL, if known.
        attempt: The attempt number (1-indexed), if known.
        max_retries: The configured maximum number of attempts, if known.
        will_retry: Whether the engine scheduled another attempt.
        status_code: The HTTP status code, if a response was received.
        response: The HTTP response, if one was received.
        cause: The underlying exception, if any.

    Example:
        ```pycon
        >>> from arefetch.exceptions import FetchError
        >>> error = FetchError("something went wrong", attempt=2, will_retry=True)
        >>> str(error)
        'something went wrong'
        >>> error.attempt
        2

        ```
    """

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        attempt: int | None = None,
        max_retries: int | None = None,
        will_retry: bool = False,
        status_code: int | None = None,
        response: httpx.Response | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.attempt = attempt
        self.max_retries = max_retries
        self.will_retry = will_retry
        self.status_code = status_code
        self.response = response
        self.cause = cause

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class AbortError(FetchError):
    """Raised when an attempt is aborted by its timeout signal."""

    def __init__(self, message: str = "The user aborted a request.", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class FetchWithRetryError(FetchError):
    """Raised when a response status code is not accepted."""
