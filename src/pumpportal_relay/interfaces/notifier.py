"""Notification sink interface for dependency inversion."""

from abc import ABC, abstractmethod
from typing import Optional


class NotifierInterface(ABC):
    """Abstract interface for notification sinks (messaging APIs)."""

    @abstractmethod
    async def send(self, text: str, parse_mode: Optional[str] = None) -> None:
        """Deliver a single message. Raises NotificationError on failure."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release any network resources held by the sink."""
        pass
