r"""Classification of a single attempt.

This module provides the ``AttemptOutcome`` value produced once per
attempt and the ``classify_response`` function deciding whether a
response is accepted, retryable or terminal.
"""

from __future__ import annotations

__all__ = [
    "AttemptOutcome",
    "OutcomeKind",
    "classify_response",
    "format_bool",
    "format_codes",
]

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from arefetch.exceptions import FetchWithRetryError

if TYPE_CHECKING:
    from collections.abc import Iterable

    import httpx

    from arefetch.options import RetryOptions

logger: logging.Logger = logging.getLogger(__name__)


class OutcomeKind(Enum):
    """Kind of outcome of one attempt."""

    ACCEPTED = "accepted"
    RETRYABLE = "retryable"
    TERMINAL = "terminal"


@dataclass
class AttemptOutcome:
    """Outcome of one attempt.

    Attributes:
        kind: Whether the attempt was accepted, can be retried or ends
            the retry loop with a failure.
        response: The HTTP response, if one was received.
        error: The error recorded for a non-accepted attempt.
    """

    kind: OutcomeKind
    response: httpx.Response | None = None
    error: Exception | None = None

    @property
    def will_retry(self) -> bool:
        """Indicate whether the engine schedules another attempt."""
        return getattr(self.error, "will_retry", False)


def format_codes(codes: Iterable[int]) -> str:
    r"""Format status codes the way they appear in error messages.

    Example:
        ```pycon
        >>> from arefetch.outcome import format_codes
        >>> format_codes((503, 408))
        '[503, 408]'

        ```
    """
    return f"[{', '.join(str(code) for code in codes)}]"


def format_bool(value: bool) -> str:
    """Format a boolean the way it appears in error messages."""
    return "true" if value else "false"


def classify_response(
    response: httpx.Response,
    options: RetryOptions,
    attempt: int,
    url: str | None = None,
) -> AttemptOutcome:
    """Classify the response received on an attempt.

    Status codes are checked in this order:

    1. In ``accept_status_codes``: accepted.
    2. ``retry_status_codes`` is non-empty and does not contain the
       status: terminal, no further attempt is made.
    3. ``retry_status_codes`` contains the status: retryable.
    4. Otherwise (empty ``retry_status_codes``): retryable.

    A retryable outcome on the last permitted attempt reports
    ``willRetry: <false>``.

    Args:
        response: The HTTP response to classify.
        options: The normalized retry options.
        attempt: The current attempt number (0-indexed).
        url: The requested URL, attached to the error.

    Returns:
        The outcome of the attempt.

    Example:
        ```pycon
        >>> from unittest.mock import Mock
        >>> from arefetch.options import RetryOptions
        >>> from arefetch.outcome import classify_response
        >>> options = RetryOptions(max_retries=3, retry_status_codes=(503,))
        >>> outcome = classify_response(Mock(status_code=503), options, attempt=0)
        >>> outcome.kind.value
        'retryable'
        >>> str(outcome.error)
        'Response.status: <503>, is in retryStatusCodes: <[503]> attempt: <1>, willRetry: <true>.'

        ```
    """
    status = response.status_code
    if status in options.accept_status_codes:
        return AttemptOutcome(kind=OutcomeKind.ACCEPTED, response=response)

    retry_codes = options.retry_status_codes
    if retry_codes and status not in retry_codes:
        message = (
            f"Response.status: <{status}>, "
            f"is not retryStatusCodes: <{format_codes(retry_codes)}> "
            f"attempt: <{attempt + 1}>, willRetry: <false>."
        )
        kind = OutcomeKind.TERMINAL
        will_retry = False
    else:
        will_retry = attempt + 1 < options.max_retries
        if retry_codes:
            reason = f"is in retryStatusCodes: <{format_codes(retry_codes)}>"
        else:
            reason = (
                f"not in expected acceptStatusCodes: <{format_codes(options.accept_status_codes)}>"
            )
        message = (
            f"Response.status: <{status}>, {reason} "
            f"attempt: <{attempt + 1}>, willRetry: <{format_bool(will_retry)}>."
        )
        kind = OutcomeKind.RETRYABLE

    logger.debug(message)
    error = FetchWithRetryError(
        message,
        url=url,
        attempt=attempt + 1,
        max_retries=options.max_retries,
        will_retry=will_retry,
        status_code=status,
        response=response,
    )
    return AttemptOutcome(kind=kind, response=response, error=error)
