"""Fallback sink that writes notifications to the log."""

from typing import Optional
from loguru import logger

from ..interfaces.notifier import NotifierInterface


class LogNotifier(NotifierInterface):
    """Logs each notification instead of sending it anywhere."""

    def __init__(self):
        self.messages_sent = 0

    async def send(self, text: str, parse_mode: Optional[str] = None) -> None:
        self.messages_sent += 1
        logger.info(f"Notification:\n{text}")

    async def close(self) -> None:
        pass
