"""
PumpPortal Relay - forwards PumpPortal token events to a Telegram chat.

This package keeps a single reconnecting websocket subscription to the
PumpPortal data feed, renders new-token and Raydium liquidity events into
Markdown messages, and delivers them to Telegram without letting a slow
sink stall the stream.

Main Components:
- PumpPortalRelay: Main interface class
- RelayConfig: Configuration management
- StreamConnection: Reconnecting feed client
- EventRouter: Envelope dispatch, rendering and history
- NotificationDispatcher: Bounded fire-and-forget delivery
- HistoryStore: Recent events per category for /list

Example usage:
    >>> import asyncio
    >>> from pumpportal_relay import PumpPortalRelay, create_default_config
    >>>
    >>> relay = PumpPortalRelay(config=create_default_config())
    >>> asyncio.run(relay.run_forever())
"""

__version__ = "0.1.0"

# Main classes
from .relay import PumpPortalRelay, RelayContext, build_context
from .config import (
    RelayConfig, StreamConfig, TelegramConfig, DispatchConfig, create_default_config
)
from .stream import StreamConnection, ConnectionState
from .router import EventRouter
from .dispatcher import NotificationDispatcher
from .history import HistoryRing, HistoryStore
from .events import Envelope, EventCategory

# Convenience imports
__all__ = [
    # Main interface
    'PumpPortalRelay',
    'RelayContext',
    'build_context',

    # Configuration
    'RelayConfig',
    'StreamConfig',
    'TelegramConfig',
    'DispatchConfig',
    'create_default_config',

    # Core components
    'StreamConnection',
    'ConnectionState',
    'EventRouter',
    'NotificationDispatcher',
    'HistoryRing',
    'HistoryStore',
    'Envelope',
    'EventCategory',

    # Package info
    '__version__',
]
