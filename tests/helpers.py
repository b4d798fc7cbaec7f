r"""Shared test helpers for the retry engine tests.

This module contains scripted transports used across unit and
integration tests to replay a sequence of responses, delays and errors.
"""

from __future__ import annotations

__all__ = [
    "HANGING_DELAY",
    "ScriptedTransport",
    "Slow",
    "create_mock_handler",
    "slow",
]

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from arefetch.abort import AbortSignal

# Delay (seconds) longer than any per-attempt timeout used in the tests
HANGING_DELAY = 10.0


@dataclass
class Slow:
    """Step answering ``response`` after ``delay`` seconds."""

    response: httpx.Response
    delay: float = HANGING_DELAY


def slow(response: httpx.Response | int, delay: float = HANGING_DELAY) -> Slow:
    """Create a step answering after a delay.

    Args:
        response: The response, or a status code.
        delay: The delay in seconds.

    Returns:
        The slow step.
    """
    if isinstance(response, int):
        response = httpx.Response(response)
    return Slow(response=response, delay=delay)


class ScriptedTransport:
    """Transport replaying one step per call.

    A step is an ``httpx.Response`` (or a status code), a ``Slow`` step
    or an exception to raise.

    Attributes:
        calls: The ``(url, options, signal)`` of every call, in order.
        cancelled: The number of calls cancelled while in flight.
    """

    def __init__(self, *steps: httpx.Response | int | Slow | Exception) -> None:
        self.steps = list(steps)
        self.calls: list[tuple[str, Mapping[str, Any], AbortSignal]] = []
        self.cancelled = 0

    async def __call__(
        self, url: str, options: Mapping[str, Any], signal: AbortSignal
    ) -> httpx.Response:
        self.calls.append((url, options, signal))
        step = self.steps[len(self.calls) - 1]
        if isinstance(step, Exception):
            raise step
        if isinstance(step, int):
            return httpx.Response(step)
        if isinstance(step, Slow):
            try:
                await asyncio.sleep(step.delay)
            except asyncio.CancelledError:
                self.cancelled += 1
                raise
            return step.response
        return step


def create_mock_handler(
    *steps: httpx.Response | int | Slow | Exception,
) -> tuple[Callable[[httpx.Request], Awaitable[httpx.Response]], list[httpx.Request]]:
    """Create an async handler for ``httpx.MockTransport``.

    Args:
        *steps: One step per request, as for ``ScriptedTransport``.

    Returns:
        A tuple of (handler, requests) where requests collects every
        request received by the handler.
    """
    requests: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        step = steps[len(requests) - 1]
        if isinstance(step, Exception):
            raise step
        if isinstance(step, int):
            return httpx.Response(step)
        if isinstance(step, Slow):
            await asyncio.sleep(step.delay)
            return httpx.Response(
                step.response.status_code,
                content=step.response.content,
                headers=step.response.headers,
            )
        return httpx.Response(step.status_code, content=step.content, headers=step.headers)

    return handler, requests
