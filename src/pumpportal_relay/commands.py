"""Telegram bot command handling (/list) via getUpdates long polling."""

import asyncio
from typing import Dict, List, Any, Callable, Optional
from loguru import logger

from .formatting import format_history_listing, split_message
from .history import HistoryStore
from .notifiers.telegram import TelegramNotifier


def parse_command(text: str) -> Optional[str]:
    """Extract the command name from ``/name@bot args``; None if not a command."""
    if not isinstance(text, str) or not text.startswith("/"):
        return None
    head = text.split(maxsplit=1)[0][1:]
    name = head.split("@", 1)[0].lower()
    return name or None


class CommandPoller:
    """Answers bot commands with data from the in-memory history."""

    def __init__(
        self,
        bot: TelegramNotifier,
        history: HistoryStore,
        poll_timeout: int = 30,
        retry_delay: float = 5.0
    ):
        self.bot = bot
        self.history = history
        self.poll_timeout = poll_timeout
        self.retry_delay = retry_delay

        self._handlers: Dict[str, Callable[[], str]] = {
            "list": self.list_recent,
        }
        self._offset: Optional[int] = None
        self._poll_task: Optional[asyncio.Task] = None
        self._running = False

        self.commands_handled = 0

    def list_recent(self) -> str:
        """Reply text for /list."""
        logger.info("List command triggered")
        return format_history_listing(self.history)

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._poll_task = asyncio.create_task(self._poll_loop())
        logger.info("Telegram command poller started")

    async def stop(self) -> None:
        self._running = False
        if self._poll_task and not self._poll_task.done():
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                pass
        self._poll_task = None
        logger.info("Telegram command poller stopped")

    async def _poll_loop(self) -> None:
        while self._running:
            try:
                updates = await self.bot.get_updates(offset=self._offset, timeout=self.poll_timeout)
                await self.process_updates(updates)
            except Exception as e:
                logger.error(f"Error polling Telegram updates: {e}")
                await asyncio.sleep(self.retry_delay)

    async def process_updates(self, updates: List[Dict[str, Any]]) -> int:
        """Handle a batch of updates and advance the offset past them.

        Malformed updates are logged and skipped so they are not fetched again.
        """
        handled = 0
        for update in updates:
            if not isinstance(update, dict):
                logger.warning(f"Skipping malformed Telegram update: {update!r}")
                continue

            update_id = update.get("update_id")
            if isinstance(update_id, int):
                self._offset = update_id + 1

            try:
                if await self.handle_update(update):
                    handled += 1
            except Exception as e:
                logger.error(f"Error handling Telegram update {update_id}: {e}")
        return handled

    async def handle_update(self, update: Dict[str, Any]) -> bool:
        """Reply to a single update if it carries a known command."""
        message = update.get("message") or {}
        chat_id = (message.get("chat") or {}).get("id")
        command = parse_command(message.get("text"))
        if command is None or chat_id is None:
            return False

        handler = self._handlers.get(command)
        if handler is None:
            logger.debug(f"Ignoring unknown command /{command}")
            return False

        try:
            for chunk in split_message(handler()):
                await self.bot.reply(chat_id, chunk, "Markdown")
        except Exception as e:
            logger.error(f"Error replying to /{command}: {e}")
            return False

        self.commands_handled += 1
        return True
