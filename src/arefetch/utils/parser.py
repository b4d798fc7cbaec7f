r"""Lenient parsing helpers for loosely-typed option values.

The helpers in this module never raise. They return ``None`` when the
value cannot be interpreted so the caller can fall back to a default.
"""

from __future__ import annotations

__all__ = ["parse_integer", "parse_integer_array"]

from typing import Any


def parse_integer(value: Any) -> int | None:
    """Parse a value as an integer.

    Integers are returned unchanged, floats are accepted only when they
    have no fractional part and strings are parsed after stripping
    surrounding whitespace. Booleans are rejected even though ``bool``
    is a subclass of ``int``.

    Args:
        value: The value to parse.

    Returns:
        The parsed integer, or ``None`` if the value is not an integer.

    Example:
        ```pycon
        >>> from arefetch.utils import parse_integer
        >>> parse_integer(5)
        5
        >>> parse_integer(" 42 ")
        42
        >>> parse_integer(3.0)
        3
        >>> parse_integer("abc") is None
        True
        >>> parse_integer(True) is None
        True

        ```
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, (str, bytes)):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def parse_integer_array(value: Any) -> tuple[int, ...] | None:
    """Parse a value as a sequence of integers.

    Only lists, tuples, sets and frozensets are accepted. Every item must
    be parseable with ``parse_integer``; a single bad item rejects the
    whole value.

    Args:
        value: The value to parse.

    Returns:
        The parsed integers as a tuple (sets are sorted), or ``None`` if
        the value is not an array of integers.

    Example:
        ```pycon
        >>> from arefetch.utils import parse_integer_array
        >>> parse_integer_array([503, "408"])
        (503, 408)
        >>> parse_integer_array([]) is None
        False
        >>> parse_integer_array("503") is None
        True
        >>> parse_integer_array([503, None]) is None
        True

        ```
    """
    if not isinstance(value, (list, tuple, set, frozenset)):
        return None
    parsed = []
    for item in value:
        number = parse_integer(item)
        if number is None:
            return None
        parsed.append(number)
    if isinstance(value, (set, frozenset)):
        parsed.sort()
    return tuple(parsed)
