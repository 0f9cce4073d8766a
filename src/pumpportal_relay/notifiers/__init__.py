"""Notification sinks."""

from .telegram import TelegramNotifier
from .log import LogNotifier

__all__ = [
    'TelegramNotifier',
    'LogNotifier',
]
