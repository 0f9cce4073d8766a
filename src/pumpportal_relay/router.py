"""Dispatch decoded envelopes to renderers, history and the notification sink."""

from typing import Dict, Any, Callable, Mapping, Optional
from loguru import logger

from .events.envelope import Envelope, EventCategory
from .formatting import RENDERERS
from .history import HistoryStore


Renderer = Callable[[Mapping[str, Any]], str]


class EventRouter:
    """Turns envelopes into user-facing messages.

    Each known category maps to a renderer. A rendered message is pushed
    onto that category's history ring first and then handed to ``deliver``
    (normally ``NotificationDispatcher.submit``). ``route`` never raises.
    """

    def __init__(
        self,
        history: HistoryStore,
        deliver: Callable[[str], Any],
        renderers: Optional[Dict[EventCategory, Renderer]] = None
    ):
        self.history = history
        self._deliver = deliver
        self._renderers: Dict[str, Renderer] = {
            category.value: renderer
            for category, renderer in (renderers or RENDERERS).items()
        }

        # Statistics
        self.events_routed = 0
        self.events_unhandled = 0
        self.render_failures = 0
        self.delivery_failures = 0

    @property
    def known_categories(self):
        return list(self._renderers)

    def route(self, envelope: Envelope) -> Optional[str]:
        """Render, record and forward one envelope; returns the message if rendered."""
        renderer = self._renderers.get(envelope.discriminant)
        if renderer is None or envelope.payload is None:
            self.events_unhandled += 1
            logger.info(f"Unhandled WebSocket event: {envelope.to_dict()}")
            return None

        logger.debug(f"Processing {envelope.discriminant} data: {envelope.payload}")

        try:
            message = renderer(envelope.payload)
        except Exception as e:
            self.render_failures += 1
            logger.error(f"Failed to render {envelope.discriminant} event: {e}")
            return None

        self.history.push(envelope.discriminant, message)
        self.events_routed += 1

        try:
            self._deliver(message)
        except Exception as e:
            self.delivery_failures += 1
            logger.error(f"Failed to hand {envelope.discriminant} notification to sink: {e}")

        return message

    def get_stats(self) -> Dict[str, Any]:
        """Get routing statistics."""
        return {
            "events_routed": self.events_routed,
            "events_unhandled": self.events_unhandled,
            "render_failures": self.render_failures,
            "delivery_failures": self.delivery_failures,
            "history": self.history.get_stats()
        }
