"""Pytest configuration and fixtures."""

import pytest

from pumpportal_relay.config import RelayConfig, StreamConfig
from pumpportal_relay.history import HistoryStore

from tests.fixtures import FakeClock, MockConnector, RecordingNotifier


@pytest.fixture
def clock():
    """Manually advanced clock."""
    return FakeClock()


@pytest.fixture
def connector():
    """Scriptable websocket connect factory."""
    return MockConnector()


@pytest.fixture
def notifier():
    """Notifier that records every delivered message."""
    return RecordingNotifier()


@pytest.fixture
def history():
    """Empty history with the default capacity."""
    return HistoryStore()


@pytest.fixture
def stream_config():
    """Stream settings with a whole-second reconnect delay."""
    return StreamConfig(url="wss://feed.test/api/data", reconnect_delay=5)


@pytest.fixture
def relay_config(stream_config):
    """Relay configuration with no network side channels."""
    config = RelayConfig(stream=stream_config)
    config.enable_health = False
    config.telegram.enable_commands = False
    return config
