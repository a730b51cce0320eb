"""Debounced sending of rapidly changing values."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


class UpdateCoalescer(Generic[V]):
    """
    Collapse a burst of updates into one trailing send.

    Every `schedule()` restarts a quiet-period timer. Only when the timer
    elapses without another `schedule()` is the latest value handed to
    the send callback, so a slider drag produces exactly one request
    carrying the final value.

    A send that has already started is never cancelled by a later
    `schedule()`; the new value simply starts a new timer.

    Must be used from a running asyncio event loop.
    """

    def __init__(self, send: Callable[[V], Awaitable[None]], delay: float = 0.2):
        """
        Initialize the coalescer.

        Args:
            send: Coroutine function that transmits a value
            delay: Quiet period in seconds
        """
        self._send = send
        self.delay = delay
        self._task: Optional[asyncio.Task] = None
        self._in_flight: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        """True while a send is waiting for the quiet period to elapse."""
        return self._task is not None and not self._task.done()

    @property
    def sending(self) -> bool:
        return bool(self._in_flight)

    def schedule(self, value: V) -> None:
        """Start or restart the timer; `value` replaces any pending value."""
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run(value))

    def cancel(self) -> bool:
        """
        Drop the pending send, if any.

        Returns:
            True if a pending send was cancelled
        """
        task, self._task = self._task, None
        if task is None or task.done():
            return False
        task.cancel()
        logger.debug("Pending update cancelled")
        return True

    async def flush(self) -> None:
        """Wait for the pending send (if any) to fire and complete."""
        task = self._task
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)
        if self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel the pending send and wait for in-flight sends to finish."""
        self.cancel()
        if self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    async def _run(self, value: V) -> None:
        await asyncio.sleep(self.delay)

        # Past the quiet period: detach so later schedule() calls start a new timer
        current = asyncio.current_task()
        if self._task is current:
            self._task = None
        self._in_flight.add(current)
        try:
            await self._send(value)
        except Exception as e:
            logger.error(f"Debounced send failed: {e}", exc_info=True)
        finally:
            self._in_flight.discard(current)
