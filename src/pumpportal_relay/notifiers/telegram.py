"""Telegram Bot API sink built on aiohttp."""

import asyncio
from typing import Dict, List, Any, Optional, Union
import aiohttp
from loguru import logger

from ..config import TelegramConfig
from ..exceptions import NotificationError, NotificationTimeoutError, ConfigurationError
from ..interfaces.notifier import NotifierInterface


class TelegramNotifier(NotifierInterface):
    """Sends messages to a Telegram chat and reads bot updates.

    The HTTP session is created lazily on first use and reused until
    ``close()``.
    """

    def __init__(
        self,
        telegram_config: TelegramConfig,
        session: Optional[aiohttp.ClientSession] = None
    ):
        if not telegram_config.bot_token:
            raise ConfigurationError("Telegram bot token is not configured")

        self.config = telegram_config
        self._session = session
        self._owns_session = session is None
        self._api_url = f"{telegram_config.api_base.rstrip('/')}/bot{telegram_config.bot_token}"

        # Statistics
        self.messages_sent = 0

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.request_timeout)
            )
            self._owns_session = True
        return self._session

    async def _call(
        self,
        method: str,
        payload: Dict[str, Any],
        timeout: Optional[float] = None
    ) -> Any:
        """Call a Bot API method and return its ``result`` field."""
        session = await self._get_session()
        request_kwargs: Dict[str, Any] = {"json": payload}
        if timeout:
            request_kwargs["timeout"] = aiohttp.ClientTimeout(total=timeout)

        try:
            async with session.post(f"{self._api_url}/{method}", **request_kwargs) as response:
                try:
                    body = await response.json(content_type=None)
                except ValueError:
                    body = {"description": await response.text()}

                if response.status != 200 or not body.get("ok", False):
                    description = body.get("description", "unknown error")
                    raise NotificationError(
                        f"Telegram {method} failed: HTTP {response.status} {description}",
                        status_code=response.status,
                        response_data=body
                    )
                return body.get("result")

        except asyncio.TimeoutError:
            raise NotificationTimeoutError(f"Telegram {method} timed out")
        except aiohttp.ClientError as e:
            raise NotificationError(f"Telegram {method} request error: {e}")

    async def send(self, text: str, parse_mode: Optional[str] = None) -> None:
        """Send a message to the configured chat."""
        await self.reply(self.config.chat_id, text, parse_mode)

    async def reply(
        self,
        chat_id: Union[str, int],
        text: str,
        parse_mode: Optional[str] = None
    ) -> None:
        """Send a message to an arbitrary chat (used for command replies)."""
        if chat_id is None:
            raise ConfigurationError("Telegram chat id is not configured")

        payload = {
            "chat_id": chat_id,
            "text": text,
            "disable_web_page_preview": True
        }
        mode = parse_mode or self.config.parse_mode
        if mode:
            payload["parse_mode"] = mode

        await self._call("sendMessage", payload)
        self.messages_sent += 1
        logger.debug(f"Notification sent to Telegram chat {chat_id}")

    async def get_updates(self, offset: Optional[int] = None, timeout: int = 0) -> List[Dict[str, Any]]:
        """Long-poll for bot updates newer than ``offset``."""
        payload: Dict[str, Any] = {"timeout": timeout, "allowed_updates": ["message"]}
        if offset is not None:
            payload["offset"] = offset

        # HTTP timeout must outlast the server-side long poll
        result = await self._call("getUpdates", payload, timeout=timeout + self.config.request_timeout)
        return result or []

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None
