"""Fire-and-forget delivery of notifications through a bounded queue."""

import asyncio
import time
from typing import Dict, Any, Optional
from loguru import logger

from .config import DispatchConfig
from .interfaces.notifier import NotifierInterface


class NotificationDispatcher:
    """Decouples frame intake from sink latency.

    ``submit()`` never blocks: it enqueues the message or, when the queue
    is full, drops it with a warning. A single worker task drains the queue
    and calls the sink with a timeout. Failed deliveries are logged and
    never retried.
    """

    def __init__(
        self,
        notifier: NotifierInterface,
        dispatch_config: Optional[DispatchConfig] = None,
        parse_mode: Optional[str] = None
    ):
        self.notifier = notifier
        self.config = dispatch_config or DispatchConfig()
        self.parse_mode = parse_mode

        self._queue: Optional[asyncio.Queue] = None
        self._worker_task: Optional[asyncio.Task] = None
        self._running = False

        # Metrics
        self.messages_submitted = 0
        self.messages_delivered = 0
        self.messages_failed = 0
        self.messages_dropped = 0
        self.last_delivery_time = 0.0

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def queue(self) -> asyncio.Queue:
        """Outbound queue, created on first use inside the running loop."""
        if self._queue is None:
            self._queue = asyncio.Queue(maxsize=self.config.max_queue_size)
        return self._queue

    async def start(self) -> None:
        """Start the delivery worker."""
        if self._running:
            return

        self._running = True
        self._worker_task = asyncio.create_task(self._worker())
        logger.info("NotificationDispatcher started")

    async def stop(self, drain_timeout: float = 5.0) -> None:
        """Stop the worker, giving queued messages a bounded chance to go out."""
        if not self._running:
            return

        self._running = False

        try:
            await asyncio.wait_for(self.queue.join(), timeout=drain_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Notification queue not drained on shutdown, {self.queue.qsize()} still queued"
            )

        if self._worker_task and not self._worker_task.done():
            self._worker_task.cancel()
            try:
                await self._worker_task
            except asyncio.CancelledError:
                pass
        self._worker_task = None

        logger.info("NotificationDispatcher stopped")

    def submit(self, text: str) -> bool:
        """Queue a message for delivery without waiting for the sink."""
        try:
            self.queue.put_nowait(text)
        except asyncio.QueueFull:
            self.messages_dropped += 1
            logger.warning("Notification queue full, dropping message")
            return False

        self.messages_submitted += 1
        return True

    async def _worker(self) -> None:
        """Drain the queue one message at a time."""
        while True:
            text = await self.queue.get()
            try:
                await self._deliver(text)
            finally:
                self.queue.task_done()

    async def _deliver(self, text: str) -> bool:
        try:
            await asyncio.wait_for(
                self.notifier.send(text, self.parse_mode),
                timeout=self.config.send_timeout
            )
        except asyncio.TimeoutError:
            self.messages_failed += 1
            logger.error(f"Notification delivery timed out after {self.config.send_timeout:g}s")
            return False
        except Exception as e:
            self.messages_failed += 1
            logger.error(f"Error sending notification: {e}")
            return False

        self.messages_delivered += 1
        self.last_delivery_time = time.time()
        return True

    def get_stats(self) -> Dict[str, Any]:
        """Get dispatcher statistics."""
        return {
            "running": self._running,
            "queue_size": self._queue.qsize() if self._queue is not None else 0,
            "max_queue_size": self.config.max_queue_size,
            "messages_submitted": self.messages_submitted,
            "messages_delivered": self.messages_delivered,
            "messages_failed": self.messages_failed,
            "messages_dropped": self.messages_dropped,
            "last_delivery_time": self.last_delivery_time
        }
