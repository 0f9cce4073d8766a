"""Configuration management for PumpPortal Relay."""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any
from pathlib import Path
import json
import os

from .utils.validation import ConfigValidator
from .exceptions import ConfigurationError


PUMPPORTAL_WS_URL = "wss://pumpportal.fun/api/data"


@dataclass
class StreamConfig:
    """Configuration for the PumpPortal websocket stream."""
    url: str = PUMPPORTAL_WS_URL
    subscriptions: List[str] = field(
        default_factory=lambda: ["subscribeNewToken", "subscribeRaydiumLiquidity"]
    )
    reconnect_delay: float = 5.0  # seconds, fixed (no backoff, no cap)
    connection_timeout: int = 10  # seconds
    ping_interval: int = 20  # seconds
    ping_timeout: int = 60  # seconds
    close_timeout: int = 10  # seconds


@dataclass
class TelegramConfig:
    """Configuration for the Telegram bot sink and command poller."""
    bot_token: Optional[str] = None
    chat_id: Optional[str] = None
    parse_mode: str = "Markdown"
    api_base: str = "https://api.telegram.org"
    request_timeout: int = 10  # seconds
    poll_timeout: int = 30  # seconds, long-poll for getUpdates
    enable_commands: bool = True

    @property
    def is_configured(self) -> bool:
        """Whether enough credentials are present to talk to Telegram."""
        return bool(self.bot_token and self.chat_id)


@dataclass
class DispatchConfig:
    """Configuration for the outbound notification queue."""
    max_queue_size: int = 100  # newest message is dropped when full
    send_timeout: float = 10.0  # seconds per sink call


@dataclass
class RelayConfig:
    """Main configuration for PumpPortal Relay."""

    stream: StreamConfig = field(default_factory=StreamConfig)
    telegram: TelegramConfig = field(default_factory=TelegramConfig)
    dispatch: DispatchConfig = field(default_factory=DispatchConfig)

    # Recent events kept per category for /list
    history_size: int = 5

    # Health endpoint
    enable_health: bool = True
    health_host: str = "0.0.0.0"
    health_port: int = 8080

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    def __post_init__(self):
        # Nested sections may arrive as plain dicts
        if isinstance(self.stream, dict):
            self.stream = StreamConfig(**self.stream)
        if isinstance(self.telegram, dict):
            self.telegram = TelegramConfig(**self.telegram)
        if isinstance(self.dispatch, dict):
            self.dispatch = DispatchConfig(**self.dispatch)

        if self.log_file and isinstance(self.log_file, str):
            self.log_file = Path(self.log_file)

    def apply_env(self, environ: Optional[Dict[str, str]] = None) -> 'RelayConfig':
        """Override settings from environment variables."""
        env = os.environ if environ is None else environ

        if env.get('TELEGRAM_BOT_TOKEN'):
            self.telegram.bot_token = env['TELEGRAM_BOT_TOKEN']
        if env.get('TELEGRAM_CHAT_ID'):
            self.telegram.chat_id = env['TELEGRAM_CHAT_ID']
        if env.get('PUMPPORTAL_WS_URL'):
            self.stream.url = env['PUMPPORTAL_WS_URL']
        if env.get('LOG_LEVEL'):
            self.log_level = env['LOG_LEVEL'].upper()
        if env.get('PORT'):
            try:
                self.health_port = int(env['PORT'])
            except ValueError:
                raise ConfigurationError(f"PORT must be an integer, got {env['PORT']!r}")

        try:
            ConfigValidator.validate_and_raise(self.to_dict())
        except Exception as e:
            raise ConfigurationError(f"Configuration validation failed: {e}")

        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        data = asdict(self)
        if isinstance(self.log_file, Path):
            data['log_file'] = str(self.log_file)
        return data

    @classmethod
    def load_from_file(cls, config_path: Path) -> 'RelayConfig':
        """Load configuration from JSON file."""
        if not config_path.exists():
            config = cls()
            config.save_to_file(config_path)
            return config

        try:
            with open(config_path, 'r') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            raise ConfigurationError(f"Failed to load configuration from {config_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration in {config_path} must be a JSON object")

        # Validate configuration data
        try:
            ConfigValidator.validate_and_raise(data)
        except Exception as e:
            raise ConfigurationError(f"Configuration validation failed: {e}")

        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigurationError(f"Unknown configuration option in {config_path}: {e}")

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to JSON file."""
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)

            data = self.to_dict()

            # Validate before saving
            ConfigValidator.validate_and_raise(data)

            with open(config_path, 'w') as f:
                json.dump(data, f, indent=2)

        except Exception as e:
            raise ConfigurationError(f"Failed to save configuration to {config_path}: {e}")


def create_default_config() -> RelayConfig:
    """Create a default configuration with environment overrides applied."""
    return RelayConfig().apply_env()
