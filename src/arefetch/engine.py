r"""Retry engine for HTTP requests.

This module provides the ``RetryEngine`` class that runs the attempt
loop: it guards each attempt with a timeout signal, classifies the
response status, records failed attempts in the caller's error sink and
decides whether to return, retry or fail.
"""

from __future__ import annotations

__all__ = ["RetryEngine"]

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from arefetch.abort import SignalTimeoutContext
from arefetch.exceptions import AbortError
from arefetch.options import normalize
from arefetch.outcome import OutcomeKind, classify_response, format_bool
from arefetch.transport import HttpxTransport

if TYPE_CHECKING:
    from collections.abc import Mapping

    import httpx

    from arefetch.options import RetryOptions
    from arefetch.transport import Transport

logger: logging.Logger = logging.getLogger(__name__)


class RetryEngine:
    """Runs one HTTP request with automatic retry logic.

    The engine keeps no state between calls to ``run``: every call uses
    its own options, timeout contexts and error sink, so one engine can
    serve concurrent calls.

    The attempt loop works as follows:

    - Each attempt is guarded by a ``SignalTimeoutContext`` of
      ``signal_timeout`` milliseconds. A slow attempt is aborted and
      recorded as an ``AbortError``.
    - An accepted status returns the response immediately.
    - A status outside a non-empty ``retry_status_codes`` ends the loop.
    - Any other status, an abort or a transport error is recorded and
      retried after ``retry_timeout`` milliseconds, until
      ``max_retries`` attempts were made.
    - The most recent error is raised when the loop ends without an
      accepted response. Earlier errors are only available in the
      error sink.

    Args:
        transport: The transport issuing the requests. Defaults to an
            ``HttpxTransport`` creating a client per request.

    Example:
        ```pycon
        >>> import asyncio
        >>> from arefetch.engine import RetryEngine
        >>> async def main():
        ...     errors = []
        ...     engine = RetryEngine()
        ...     return await engine.run(
        ...         "https://api.example.com/data",
        ...         {"method": "GET"},
        ...         {"maxRetries": 5, "retryStatusCodes": [503], "errorSink": errors},
        ...     )
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(self, transport: Transport | None = None) -> None:
        self.transport: Transport = transport if transport is not None else HttpxTransport()

    async def run(
        self,
        url: str,
        request_options: Mapping[str, Any] | None = None,
        retry_options: RetryOptions | Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """Send the request, retrying until it is accepted or fails.

        Args:
            url: The URL to send the request to.
            request_options: Options passed unmodified to the transport.
            retry_options: Raw or normalized retry options. Missing or
                invalid values take their defaults.

        Returns:
            The first response whose status code is accepted.

        Raises:
            FetchWithRetryError: If the last attempt received a response
                that is not accepted.
            AbortError: If the last attempt timed out.
            Exception: Any other error raised by the transport on the
                last attempt, unwrapped.
        """
        options = normalize(retry_options)
        request_options = request_options if request_options is not None else {}

        for attempt in range(options.max_retries):
            logger.debug(f"Request to {url}: attempt {attempt + 1}/{options.max_retries}")
            try:
                with SignalTimeoutContext.create(options.signal_timeout, url) as context:
                    response = await context.signal.race(
                        self.transport(url, request_options, context.signal)
                    )
                    context.disarm()
            except AbortError as exc:
                error = self._abort_error(exc, url, attempt, options)
                terminal = False
            except Exception as exc:  # noqa: BLE001
                logger.debug(
                    f"Request to {url} encountered {type(exc).__name__} on attempt "
                    f"{attempt + 1}/{options.max_retries}: {exc}"
                )
                error = exc
                terminal = False
            else:
                outcome = classify_response(response, options, attempt, url)
                if outcome.kind == OutcomeKind.ACCEPTED:
                    logger.debug(
                        f"Request to {url} accepted with status {response.status_code} "
                        f"on attempt {attempt + 1}"
                    )
                    return response
                error = outcome.error
                terminal = outcome.kind == OutcomeKind.TERMINAL

            options.error_sink.append(error)
            if terminal or attempt + 1 >= options.max_retries:
                logger.debug(f"Request to {url} failed after {attempt + 1} attempts")
                raise error

            logger.debug(f"Waiting {options.retry_timeout}ms before retry")
            await asyncio.sleep(options.retry_timeout / 1000)

        # Unreachable: max_retries >= 1 and the last attempt returns or raises.
        msg = f"Request to {url} made no attempt"
        raise RuntimeError(msg)

    @staticmethod
    def _abort_error(
        exc: AbortError, url: str, attempt: int, options: RetryOptions
    ) -> AbortError:
        will_retry = attempt + 1 < options.max_retries
        message = (
            f"Request.signal: <aborted> after: <{options.signal_timeout}ms>, "
            f"attempt: <{attempt + 1}>, willRetry: <{format_bool(will_retry)}>."
        )
        logger.debug(message)
        error = AbortError(
            message,
            url=url,
            attempt=attempt + 1,
            max_retries=options.max_retries,
            will_retry=will_retry,
            cause=exc,
        )
        error.__cause__ = exc
        return error
