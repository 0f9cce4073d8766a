"""Abstract interfaces for PumpPortal Relay components."""

from .notifier import NotifierInterface
from .clock import ClockInterface, TimerHandle

__all__ = [
    'NotifierInterface',
    'ClockInterface',
    'TimerHandle',
]
