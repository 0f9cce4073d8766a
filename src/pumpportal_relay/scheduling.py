"""Fixed-delay reconnect timer with a single in-flight timer."""

import asyncio
from typing import Callable, Optional
from loguru import logger

from .interfaces.clock import ClockInterface, TimerHandle


class AsyncioClock(ClockInterface):
    """Clock backed by the running asyncio event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)

    def time(self) -> float:
        return asyncio.get_running_loop().time()


class ReconnectTimer:
    """Schedules a callback after a fixed delay, at most once at a time.

    Calling ``schedule()`` while a timer is already pending is a no-op, so
    repeated disconnect signals never stack reconnect attempts.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], None],
        clock: Optional[ClockInterface] = None
    ):
        self.delay = delay
        self._callback = callback
        self._clock = clock or AsyncioClock()
        self._handle: Optional[TimerHandle] = None
        self.fired_count = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self) -> bool:
        """Arm the timer. Returns False if one was already pending."""
        if self._handle is not None:
            logger.debug("Reconnect already scheduled, ignoring duplicate request")
            return False

        self._handle = self._clock.call_later(self.delay, self._fire)
        return True

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self.fired_count += 1
        try:
            self._callback()
        except Exception as e:
            logger.error(f"Reconnect callback failed: {e}")
