r"""Per-attempt cancellation signal and timeout context.

This module provides ``AbortSignal``, a one-shot cancellation token that
can race an awaitable, and ``SignalTimeoutContext``, which aborts its
signal automatically once a timeout elapses unless it was disarmed
first.
"""

from __future__ import annotations

__all__ = ["AbortSignal", "SignalTimeoutContext"]

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, TypeVar

from arefetch.exceptions import AbortError

if TYPE_CHECKING:
    from collections.abc import Awaitable
    from types import TracebackType
    from typing import Self

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class AbortSignal:
    """One-shot cancellation token.

    Once aborted, a signal stays aborted. Operations awaited through
    ``race`` are cancelled when the signal aborts and fail with
    ``AbortError``.

    Example:
        ```pycon
        >>> import asyncio
        >>> from arefetch.abort import AbortSignal
        >>> signal = AbortSignal()
        >>> signal.aborted
        False
        >>> signal.abort()
        >>> signal.aborted
        True

        ```
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: str | None = None

    @property
    def aborted(self) -> bool:
        """Indicate whether the signal was aborted."""
        return self._event.is_set()

    def abort(self, reason: str | None = None) -> None:
        """Abort the signal.

        Aborting an already aborted signal does nothing.

        Args:
            reason: Optional message for the ``AbortError`` raised by
                ``race``.
        """
        if self.aborted:
            return
        self.reason = reason
        self._event.set()

    async def wait(self) -> None:
        """Wait until the signal is aborted."""
        await self._event.wait()

    async def race(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the signal aborts first.

        Args:
            awaitable: The operation to run, typically a transport call.

        Returns:
            The result of ``awaitable``.

        Raises:
            AbortError: If the signal aborted before ``awaitable``
                completed. The operation is cancelled.
        """
        if self.aborted:
            # Avoid "coroutine was never awaited" warnings.
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise self._error()

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self.wait())
        try:
            await asyncio.wait((task, waiter), return_when=asyncio.FIRST_COMPLETED)
        except BaseException:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task.done():
            return task.result()

        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        raise self._error()

    def _error(self) -> AbortError:
        if self.reason is None:
            return AbortError()
        return AbortError(self.reason)


class SignalTimeoutContext:
    """Abort a signal once a timeout elapses, unless disarmed.

    The context is armed on creation. Disarming it before the timer
    fires suppresses the abort; disarming after the timer fired does
    nothing. Leaving the ``with`` block (or calling ``close``) always
    cancels the pending timer.

    Must be created from a running event loop.

    Args:
        timeout: The timeout in milliseconds.
        url: Optional URL of the guarded request, used in log messages.

    Example:
        ```pycon
        >>> import asyncio
        >>> from arefetch.abort import SignalTimeoutContext
        >>> async def main():
        ...     with SignalTimeoutContext.create(10) as context:
        ...         await asyncio.sleep(0.05)
        ...         return context.signal.aborted
        ...
        >>> asyncio.run(main())
        True

        ```
    """

    def __init__(self, timeout: int, url: str | None = None) -> None:
        self.timeout = timeout
        self.url = url
        self.signal = AbortSignal()
        self.armed = True
        loop = asyncio.get_running_loop()
        self._handle: asyncio.TimerHandle | None = loop.call_later(
            timeout / 1000, self._on_timeout
        )

    @classmethod
    def create(cls, timeout: int, url: str | None = None) -> SignalTimeoutContext:
        """Create an armed context.

        Args:
            timeout: The timeout in milliseconds.
            url: Optional URL of the guarded request.

        Returns:
            The armed context.
        """
        return cls(timeout, url)

    @property
    def closed(self) -> bool:
        """Indicate whether the timer is no longer pending."""
        return self._handle is None

    def disarm(self) -> None:
        """Prevent a pending timer from aborting the signal."""
        self.armed = False

    def close(self) -> None:
        """Cancel the pending timer, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _on_timeout(self) -> None:
        self._handle = None
        if not self.armed:
            return
        logger.debug(f"Request to {self.url} aborted after {self.timeout}ms")
        self.signal.abort()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
