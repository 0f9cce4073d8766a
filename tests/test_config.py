"""Tests for configuration loading, env overrides and validation."""

import json

import pytest

from pumpportal_relay.config import (
    RelayConfig, StreamConfig, TelegramConfig, DispatchConfig, PUMPPORTAL_WS_URL
)
from pumpportal_relay.exceptions import ConfigurationError
from pumpportal_relay.utils.validation import ConfigValidator, ValidationError


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self):
        config = RelayConfig()

        assert config.stream.url == PUMPPORTAL_WS_URL
        assert config.stream.subscriptions == ["subscribeNewToken", "subscribeRaydiumLiquidity"]
        assert config.stream.reconnect_delay == 5.0
        assert config.history_size == 5
        assert config.dispatch.max_queue_size == 100
        assert config.health_port == 8080
        assert not config.telegram.is_configured

    def test_nested_dicts_become_dataclasses(self):
        config = RelayConfig(
            stream={"url": "wss://other.test/ws"},
            telegram={"bot_token": "t", "chat_id": "1"},
            dispatch={"send_timeout": 2.0},
            log_file="logs/relay.log",
        )

        assert isinstance(config.stream, StreamConfig)
        assert isinstance(config.telegram, TelegramConfig)
        assert isinstance(config.dispatch, DispatchConfig)
        assert config.telegram.is_configured
        assert config.log_file.name == "relay.log"


class TestApplyEnv:
    """Tests for environment overrides."""

    def test_overrides(self):
        config = RelayConfig().apply_env({
            "TELEGRAM_BOT_TOKEN": "123:abc",
            "TELEGRAM_CHAT_ID": "-100200",
            "PORT": "3000",
            "PUMPPORTAL_WS_URL": "wss://mirror.test/api/data",
            "LOG_LEVEL": "debug",
        })

        assert config.telegram.bot_token == "123:abc"
        assert config.telegram.chat_id == "-100200"
        assert config.health_port == 3000
        assert config.stream.url == "wss://mirror.test/api/data"
        assert config.log_level == "DEBUG"

    def test_empty_values_are_ignored(self):
        config = RelayConfig().apply_env({"TELEGRAM_BOT_TOKEN": "", "PORT": ""})

        assert config.telegram.bot_token is None
        assert config.health_port == 8080

    def test_non_numeric_port_raises(self):
        with pytest.raises(ConfigurationError):
            RelayConfig().apply_env({"PORT": "eighty"})

    def test_invalid_url_raises(self):
        with pytest.raises(ConfigurationError):
            RelayConfig().apply_env({"PUMPPORTAL_WS_URL": "https://pumpportal.fun/api/data"})


class TestFilePersistence:
    """Tests for JSON load and save."""

    def test_missing_file_writes_defaults(self, tmp_path):
        path = tmp_path / "config" / "relay.json"

        config = RelayConfig.load_from_file(path)

        assert path.exists()
        assert config == RelayConfig()
        assert json.loads(path.read_text())["history_size"] == 5

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "relay.json"
        original = RelayConfig(history_size=3, log_file="relay.log")
        original.stream.reconnect_delay = 2
        original.save_to_file(path)

        loaded = RelayConfig.load_from_file(path)

        assert loaded.history_size == 3
        assert loaded.stream.reconnect_delay == 2
        assert loaded.log_file.name == "relay.log"

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "relay.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError):
            RelayConfig.load_from_file(path)

    def test_invalid_values_raise(self, tmp_path):
        path = tmp_path / "relay.json"
        path.write_text(json.dumps({"history_size": 0, "stream": {"reconnect_delay": -1}}))

        with pytest.raises(ConfigurationError, match="history_size"):
            RelayConfig.load_from_file(path)

    def test_unknown_option_raises(self, tmp_path):
        path = tmp_path / "relay.json"
        path.write_text(json.dumps({"stream": {"backoff": 2}}))

        with pytest.raises(ConfigurationError):
            RelayConfig.load_from_file(path)


class TestConfigValidator:
    """Tests for ConfigValidator."""

    @pytest.mark.parametrize("url,valid", [
        ("wss://pumpportal.fun/api/data", True),
        ("ws://localhost:8765", True),
        ("https://pumpportal.fun", False),
        ("", False),
        (None, False),
    ])
    def test_stream_url(self, url, valid):
        assert ConfigValidator.validate_stream_url(url) is valid

    def test_collects_section_errors(self):
        errors = ConfigValidator.validate_relay_config({
            "log_level": "LOUD",
            "health_port": 70000,
            "telegram": {"parse_mode": "BBCode"},
            "dispatch": {"max_queue_size": 0},
        })

        assert len(errors) == 4
        assert any(e.startswith("telegram:") for e in errors)

    def test_validate_and_raise(self):
        with pytest.raises(ValidationError):
            ConfigValidator.validate_and_raise({"stream": "wss://x"})

        ConfigValidator.validate_and_raise(RelayConfig().to_dict())
