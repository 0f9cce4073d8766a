"""Clock interface for scheduling delayed callbacks."""

from abc import ABC, abstractmethod
from typing import Callable, Protocol


class TimerHandle(Protocol):
    """Handle of a scheduled callback (asyncio.TimerHandle compatible)."""

    def cancel(self) -> None:
        ...


class ClockInterface(ABC):
    """Abstract interface for a clock that can run callbacks later."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay`` seconds."""
        pass

    @abstractmethod
    def time(self) -> float:
        """Current time in seconds on this clock."""
        pass
