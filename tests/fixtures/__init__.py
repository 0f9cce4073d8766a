"""Test fixtures and mock data for PumpPortal Relay tests."""

from .mock_data import (
    NEW_TOKEN_PAYLOAD, RAYDIUM_PAYLOAD, ACK_FRAME,
    make_frame, new_token_frame, raydium_frame, RecordingNotifier
)
from .mock_websocket import MockFeedSocket, MockConnector
from .fake_clock import FakeClock

__all__ = [
    'NEW_TOKEN_PAYLOAD',
    'RAYDIUM_PAYLOAD',
    'ACK_FRAME',
    'make_frame',
    'new_token_frame',
    'raydium_frame',
    'RecordingNotifier',
    'MockFeedSocket',
    'MockConnector',
    'FakeClock',
]
