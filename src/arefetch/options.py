r"""Retry options and their normalization.

This module provides the ``RetryOptions`` dataclass, the fully populated
configuration used by the retry engine, and the ``normalize`` function
that builds it from a loosely-typed mapping. Normalization is lenient:
missing, unrecognized or invalid values fall back to the documented
defaults and it never raises.
"""

from __future__ import annotations

__all__ = ["RetryOptions", "normalize"]

from collections.abc import Mapping, MutableSequence
from dataclasses import dataclass, field, fields
from typing import Any

from arefetch.config import (
    DEFAULT_ACCEPT_STATUS_CODES,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_STATUS_CODES,
    DEFAULT_RETRY_TIMEOUT,
    DEFAULT_SIGNAL_TIMEOUT,
)
from arefetch.utils.parser import parse_integer, parse_integer_array

# Raw keys recognized for each field, by priority. The camelCase keys are
# the documented ones, ``statusCodes`` and ``timeout`` are legacy names.
_RAW_KEYS: dict[str, tuple[str, ...]] = {
    "max_retries": ("maxRetries", "max_retries"),
    "signal_timeout": ("signalTimeout", "signal_timeout"),
    "retry_timeout": ("retryTimeout", "retry_timeout", "timeout"),
    "accept_status_codes": ("acceptStatusCodes", "accept_status_codes", "statusCodes"),
    "retry_status_codes": ("retryStatusCodes", "retry_status_codes"),
    "error_sink": ("errorSink", "error_sink"),
}


@dataclass
class RetryOptions:
    """Configuration of one retry sequence.

    Args:
        max_retries: Maximum number of attempts, including the first one.
            Must be >= 1.
        signal_timeout: Per-attempt timeout in milliseconds. Must be > 0.
        retry_timeout: Delay between two attempts in milliseconds.
            Must be > 0.
        accept_status_codes: Status codes that end the loop successfully.
        retry_status_codes: Status codes explicitly marked retryable.
            When empty, anything not accepted is retried.
        error_sink: Caller-owned list receiving one error per failed
            attempt, in chronological order.

    Raises:
        ValueError: If a field is out of range.

    Example:
        ```pycon
        >>> from arefetch.options import RetryOptions
        >>> options = RetryOptions(max_retries=5, retry_status_codes=(503,))
        >>> options.max_retries
        5
        >>> options.accept_status_codes
        (200,)

        ```
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    signal_timeout: int = DEFAULT_SIGNAL_TIMEOUT
    retry_timeout: int = DEFAULT_RETRY_TIMEOUT
    accept_status_codes: tuple[int, ...] = DEFAULT_ACCEPT_STATUS_CODES
    retry_status_codes: tuple[int, ...] = DEFAULT_RETRY_STATUS_CODES
    error_sink: list[Exception] = field(default_factory=list, compare=False)

    def __post_init__(self) -> None:
        if self.max_retries < 1:
            msg = f"max_retries must be >= 1, got {self.max_retries}"
            raise ValueError(msg)
        if self.signal_timeout <= 0:
            msg = f"signal_timeout must be > 0, got {self.signal_timeout}"
            raise ValueError(msg)
        if self.retry_timeout <= 0:
            msg = f"retry_timeout must be > 0, got {self.retry_timeout}"
            raise ValueError(msg)
        for name in ("accept_status_codes", "retry_status_codes"):
            codes = tuple(getattr(self, name))
            if any(code < 0 for code in codes):
                msg = f"{name} must contain non-negative integers, got {codes}"
                raise ValueError(msg)
            setattr(self, name, codes)


def _lookup(raw: Mapping[str, Any], name: str) -> Any:
    for key in _RAW_KEYS[name]:
        if key in raw:
            return raw[key]
    return None


def _positive_integer(value: Any, default: int) -> int:
    number = parse_integer(value)
    if number is None or number < 1:
        return default
    return number


def _status_codes(value: Any, default: tuple[int, ...]) -> tuple[int, ...]:
    codes = parse_integer_array(value)
    if codes is None or any(code < 0 for code in codes):
        return default
    return codes


def normalize(raw: Any = None) -> RetryOptions:
    r"""Normalize a loosely-typed configuration into ``RetryOptions``.

    Recognized keys are ``maxRetries``, ``signalTimeout``,
    ``retryTimeout``, ``acceptStatusCodes``, ``retryStatusCodes`` and
    ``errorSink``. The snake_case field names are accepted too, as are
    the legacy ``statusCodes`` and ``timeout`` keys when the documented
    key is absent. Unrecognized keys are ignored.

    Args:
        raw: ``None``, a mapping or an existing ``RetryOptions``. Any
            other value yields the defaults.

    Returns:
        A fully populated ``RetryOptions``. The error sink is kept by
        reference when it is a mutable sequence.

    Example:
        ```pycon
        >>> from arefetch.options import normalize
        >>> options = normalize({"maxRetries": "5", "retryStatusCodes": [503, 408]})
        >>> options.max_retries, options.retry_status_codes
        (5, (503, 408))
        >>> normalize({"maxRetries": "abc"}).max_retries
        3
        >>> normalize([1, 2, 3]).accept_status_codes
        (200,)

        ```
    """
    if isinstance(raw, RetryOptions):
        raw = {f.name: getattr(raw, f.name) for f in fields(raw)}
    if not isinstance(raw, Mapping):
        raw = {}

    sink = _lookup(raw, "error_sink")
    if not isinstance(sink, MutableSequence):
        sink = []

    return RetryOptions(
        max_retries=_positive_integer(_lookup(raw, "max_retries"), DEFAULT_MAX_RETRIES),
        signal_timeout=_positive_integer(_lookup(raw, "signal_timeout"), DEFAULT_SIGNAL_TIMEOUT),
        retry_timeout=_positive_integer(_lookup(raw, "retry_timeout"), DEFAULT_RETRY_TIMEOUT),
        accept_status_codes=_status_codes(
            _lookup(raw, "accept_status_codes"), DEFAULT_ACCEPT_STATUS_CODES
        ),
        retry_status_codes=_status_codes(
            _lookup(raw, "retry_status_codes"), DEFAULT_RETRY_STATUS_CODES
        ),
        error_sink=sink,
    )
