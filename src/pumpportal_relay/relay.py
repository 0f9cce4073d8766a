"""Main PumpPortal Relay class that wires and runs all components."""

import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any, Callable
from loguru import logger

from .config import RelayConfig, create_default_config
from .commands import CommandPoller
from .dispatcher import NotificationDispatcher
from .exceptions import RelayError
from .health import HealthServer
from .history import HistoryStore
from .interfaces.clock import ClockInterface
from .interfaces.notifier import NotifierInterface
from .notifiers import LogNotifier, TelegramNotifier
from .router import EventRouter
from .stream import StreamConnection


@dataclass
class RelayContext:
    """Process-wide state, owned by the entry point and shared by reference."""
    config: RelayConfig
    history: HistoryStore
    notifier: NotifierInterface
    dispatcher: NotificationDispatcher
    router: EventRouter
    stream: StreamConnection
    poller: Optional[CommandPoller] = None
    health: Optional[HealthServer] = None


def build_context(
    config: RelayConfig,
    notifier: Optional[NotifierInterface] = None,
    clock: Optional[ClockInterface] = None,
    connect: Optional[Callable[..., Any]] = None
) -> RelayContext:
    """Create every component for one relay instance."""
    history = HistoryStore(capacity=config.history_size)

    if notifier is None:
        if config.telegram.is_configured:
            notifier = TelegramNotifier(config.telegram)
        else:
            logger.warning("Telegram credentials missing, notifications will only be logged")
            notifier = LogNotifier()

    dispatcher = NotificationDispatcher(
        notifier, config.dispatch, parse_mode=config.telegram.parse_mode
    )
    router = EventRouter(history, dispatcher.submit)
    stream = StreamConnection(router.route, config.stream, clock=clock, connect=connect)

    poller = None
    if config.telegram.enable_commands and isinstance(notifier, TelegramNotifier):
        poller = CommandPoller(
            notifier, history,
            poll_timeout=config.telegram.poll_timeout,
            retry_delay=config.stream.reconnect_delay
        )

    health = None
    if config.enable_health:
        health = HealthServer(config.health_host, config.health_port)

    return RelayContext(
        config=config,
        history=history,
        notifier=notifier,
        dispatcher=dispatcher,
        router=router,
        stream=stream,
        poller=poller,
        health=health
    )


class PumpPortalRelay:
    """
    Relays PumpPortal token events to a Telegram chat.

    Coordinates the stream connection, event router, notification
    dispatcher, command poller and health endpoint.
    """

    def __init__(
        self,
        config: Optional[RelayConfig] = None,
        config_path: Optional[Path] = None,
        notifier: Optional[NotifierInterface] = None,
        clock: Optional[ClockInterface] = None,
        connect: Optional[Callable[..., Any]] = None,
        setup_logging: bool = True
    ):
        """
        Initialize PumpPortal Relay.

        Args:
            config: Configuration object
            config_path: Path to configuration file (alternative to config)
            notifier: Custom notification sink (for dependency injection)
            clock: Custom clock for the reconnect timer (for dependency injection)
            connect: Custom websocket connect factory (for dependency injection)
            setup_logging: Whether to (re)configure loguru sinks
        """
        try:
            if config:
                self.config = config
            elif config_path:
                self.config = RelayConfig.load_from_file(config_path).apply_env()
            else:
                self.config = create_default_config()

            if setup_logging:
                self._setup_logging()

            self.context = build_context(self.config, notifier=notifier, clock=clock, connect=connect)
            self._stop_event: Optional[asyncio.Event] = None
            self._running = False

            logger.info("PumpPortal Relay initialized")

        except RelayError:
            raise
        except Exception as e:
            logger.error(f"Failed to initialize PumpPortal Relay: {e}")
            raise RelayError(f"Initialization failed: {e}")

    def _setup_logging(self):
        """Set up logging configuration."""
        # Remove default logger
        logger.remove()

        # Add console handler
        logger.add(
            sys.stdout,
            level=self.config.log_level,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
        )

        # Add file handler if specified
        if self.config.log_file:
            logger.add(
                self.config.log_file,
                level=self.config.log_level,
                format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
                rotation="10 MB",
                retention="7 days"
            )

    @property
    def history(self) -> HistoryStore:
        return self.context.history

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self):
        """Start all components. Nothing here is fatal except programming errors."""
        if self._running:
            return

        logger.info("Starting PumpPortal Relay...")
        self._stop_event = asyncio.Event()

        await self.context.dispatcher.start()
        self.context.stream.start()

        if self.context.health:
            try:
                await self.context.health.start()
            except OSError as e:
                logger.error(f"Health server failed to start on port {self.context.health.port}: {e}")

        if self.context.poller:
            await self.context.poller.start()
        else:
            logger.info("Bot commands disabled")

        self._running = True
        logger.info("PumpPortal Relay started successfully")

    async def stop(self):
        """Stop all components and release resources."""
        if not self._running:
            return

        logger.info("Stopping PumpPortal Relay...")

        if self.context.poller:
            await self.context.poller.stop()
        if self.context.health:
            await self.context.health.stop()

        await self.context.stream.stop()
        await self.context.dispatcher.stop()

        try:
            await self.context.notifier.close()
        except Exception as e:
            logger.warning(f"Error closing notifier: {e}")

        self._running = False
        logger.info("PumpPortal Relay stopped")

    def request_stop(self):
        """Ask ``run_forever`` to return."""
        if self._stop_event is not None:
            self._stop_event.set()

    async def run_forever(self):
        """Run until ``request_stop()`` is called or the task is cancelled."""
        await self.start()
        try:
            await self._stop_event.wait()
        finally:
            await self.stop()

    def get_status(self) -> Dict[str, Any]:
        """Get comprehensive relay status."""
        return {
            "running": self._running,
            "stream": self.context.stream.get_stats(),
            "router": self.context.router.get_stats(),
            "dispatcher": self.context.dispatcher.get_stats(),
            "commands_enabled": self.context.poller is not None,
            "health_server": self.context.health.is_running if self.context.health else False,
            "config": {
                "url": self.config.stream.url,
                "subscriptions": list(self.config.stream.subscriptions),
                "reconnect_delay": self.config.stream.reconnect_delay,
                "history_size": self.config.history_size,
                "telegram_configured": self.config.telegram.is_configured
            }
        }

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()
