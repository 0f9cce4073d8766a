"""Reconnecting websocket client for the PumpPortal data feed."""

import asyncio
import time
import websockets
from websockets.exceptions import ConnectionClosed
from typing import Dict, Any, Optional, Callable
from enum import Enum
from loguru import logger

from .config import StreamConfig
from .events.envelope import (
    Envelope, parse_frame, envelope_from_frame, is_acknowledgement, subscription_message
)
from .exceptions import StreamError, StreamConnectionError, FrameDecodeError
from .interfaces.clock import ClockInterface
from .scheduling import ReconnectTimer


class ConnectionState(Enum):
    """Simple connection state machine."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class StreamConnection:
    """Keeps exactly one subscription to the feed alive for the life of the process.

    Any terminating condition (failed handshake, peer close, read error)
    moves the connection back to DISCONNECTED and arms a single fixed-delay
    reconnect. Only ``stop()`` ends the cycle.
    """

    def __init__(
        self,
        on_envelope: Callable[[Envelope], None],
        stream_config: Optional[StreamConfig] = None,
        clock: Optional[ClockInterface] = None,
        connect: Optional[Callable[..., Any]] = None
    ):
        """
        Initialize stream connection.

        Args:
            on_envelope: Called synchronously with every decoded envelope, in arrival order
            stream_config: Endpoint, subscriptions and timing settings
            clock: Clock for the reconnect timer (defaults to the asyncio loop)
            connect: Websocket connect factory (defaults to ``websockets.connect``)
        """
        self.config = stream_config or StreamConfig()
        self.url = self.config.url
        self._on_envelope = on_envelope
        self._connect = connect or websockets.connect

        # Simple state
        self.state = ConnectionState.DISCONNECTED
        self.websocket = None
        self.connection_task: Optional[asyncio.Task] = None
        self._stopped = False

        self._reconnect_timer = ReconnectTimer(self.config.reconnect_delay, self.start, clock)

        # Statistics
        self.connection_attempts = 0
        self.reconnects_scheduled = 0
        self.messages_received = 0
        self.decode_failures = 0
        self.last_message_time = 0.0

    def start(self) -> None:
        """Begin connecting if currently disconnected. Outcomes are asynchronous."""
        if self._stopped:
            logger.debug("Stream stopped, not connecting")
            return
        if self.state != ConnectionState.DISCONNECTED:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            raise StreamError("StreamConnection.start() requires a running event loop")

        self.state = ConnectionState.CONNECTING
        self.connection_attempts += 1
        self.connection_task = loop.create_task(self._run())

    async def stop(self) -> None:
        """Close the active connection and suppress further reconnects."""
        self._stopped = True
        self._reconnect_timer.cancel()

        if self.websocket is not None:
            try:
                await self.websocket.close()
            except Exception as e:
                logger.warning(f"Error closing WebSocket: {e}")

        task = self.connection_task
        if task and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        self.websocket = None
        self.state = ConnectionState.DISCONNECTED
        logger.info("Stream stopped")

    async def _run(self) -> None:
        """One connection lifetime: open, subscribe, read until it ends."""
        try:
            await self._open()
            await self._subscribe_all()
            await self._message_loop()
        except StreamConnectionError as e:
            logger.error(f"WebSocket connection failed: {e}")
        except ConnectionClosed as e:
            logger.warning(f"WebSocket connection closed: {e}")
        except Exception as e:
            logger.error(f"Stream error: {e}")
        finally:
            self._handle_disconnect()

    async def _open(self) -> None:
        logger.info(f"Connecting to {self.url}")
        try:
            self.websocket = await self._connect(
                self.url,
                ping_interval=self.config.ping_interval,
                ping_timeout=self.config.ping_timeout,
                open_timeout=self.config.connection_timeout,
                close_timeout=self.config.close_timeout
            )
        except Exception as e:
            raise StreamConnectionError(f"Connection failed: {e}", url=self.url)

        self.state = ConnectionState.CONNECTED
        logger.info("WebSocket connection established")

    async def _subscribe_all(self) -> None:
        """Send subscription requests. No acknowledgement is awaited."""
        for method in self.config.subscriptions:
            try:
                await self.websocket.send(subscription_message(method))
                logger.info(f"Sent subscription request: {method}")
            except Exception as e:
                logger.error(f"Subscription request {method} failed: {e}")

    async def _message_loop(self) -> None:
        async for frame in self.websocket:
            self.handle_frame(frame)
        logger.warning("WebSocket connection closed")

    def handle_frame(self, frame) -> None:
        """Decode one frame and hand it to the router; bad frames are dropped."""
        self.messages_received += 1
        self.last_message_time = time.time()

        try:
            data = parse_frame(frame)
            if is_acknowledgement(data):
                logger.info(f"Subscription confirmed: {data['message']}")
                return
            envelope = envelope_from_frame(data)
        except FrameDecodeError as e:
            self.decode_failures += 1
            logger.error(f"Discarding frame: {e}")
            return

        logger.debug(f"Received {envelope.discriminant} event: {envelope.payload}")

        try:
            self._on_envelope(envelope)
        except Exception as e:
            logger.error(f"Envelope handler error for {envelope.discriminant}: {e}")

    def _handle_disconnect(self) -> None:
        """Return to DISCONNECTED and arm the reconnect timer."""
        self.websocket = None
        self.state = ConnectionState.DISCONNECTED

        if self._stopped:
            return

        if self._reconnect_timer.schedule():
            self.reconnects_scheduled += 1
            logger.warning(f"Reconnecting in {self._reconnect_timer.delay:g} seconds...")

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect_timer.pending

    def is_connected(self) -> bool:
        """Check if WebSocket is connected."""
        return self.state == ConnectionState.CONNECTED

    def get_stats(self) -> Dict[str, Any]:
        """Get connection statistics."""
        return {
            "state": self.state.value,
            "url": self.url,
            "connection_attempts": self.connection_attempts,
            "reconnects_scheduled": self.reconnects_scheduled,
            "reconnect_pending": self.reconnect_pending,
            "messages_received": self.messages_received,
            "decode_failures": self.decode_failures,
            "last_message_time": self.last_message_time
        }
