r"""Utility functions for parsing loosely-typed retry options."""

from __future__ import annotations

__all__ = ["parse_integer", "parse_integer_array"]

from arefetch.utils.parser import parse_integer, parse_integer_array
