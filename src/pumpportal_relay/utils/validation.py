"""Configuration validation utilities."""

from typing import List, Dict, Any
from urllib.parse import urlparse


class ValidationError(Exception):
    """Configuration validation error."""
    pass


class ConfigValidator:
    """Validator for PumpPortal Relay configuration."""

    VALID_LOG_LEVELS = ['TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL']
    VALID_PARSE_MODES = ['Markdown', 'MarkdownV2', 'HTML']

    @classmethod
    def validate_stream_url(cls, url: str) -> bool:
        """Validate websocket endpoint URL (ws:// or wss://)."""
        if not isinstance(url, str) or not url:
            return False
        parsed = urlparse(url)
        return parsed.scheme in ('ws', 'wss') and bool(parsed.netloc)

    @classmethod
    def validate_positive_number(cls, value: Any) -> bool:
        """Validate a strictly positive int or float (bools rejected)."""
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return value > 0

    @classmethod
    def validate_port(cls, port: Any) -> bool:
        """Validate TCP port number."""
        if isinstance(port, bool) or not isinstance(port, int):
            return False
        return 1 <= port <= 65535

    @classmethod
    def validate_log_level(cls, log_level: str) -> bool:
        """Validate log level."""
        if not isinstance(log_level, str):
            return False
        return log_level.upper() in cls.VALID_LOG_LEVELS

    @classmethod
    def validate_subscriptions(cls, subscriptions: Any) -> List[str]:
        """Validate list of subscription method names and return errors."""
        if not isinstance(subscriptions, list):
            return ["subscriptions must be a list"]

        errors = []
        for i, method in enumerate(subscriptions):
            if not isinstance(method, str) or not method.strip():
                errors.append(f"subscriptions[{i}] must be a non-empty string")
        return errors

    @classmethod
    def validate_stream_config(cls, config: Dict[str, Any]) -> List[str]:
        """Validate stream configuration dictionary."""
        errors = []

        if 'url' in config and not cls.validate_stream_url(config['url']):
            errors.append(f"invalid stream url (must be ws:// or wss://): {config['url']}")

        if 'subscriptions' in config:
            errors.extend(cls.validate_subscriptions(config['subscriptions']))

        for field in ['reconnect_delay', 'connection_timeout', 'ping_interval',
                      'ping_timeout', 'close_timeout']:
            if field in config and not cls.validate_positive_number(config[field]):
                errors.append(f"{field} must be a positive number")

        return errors

    @classmethod
    def validate_telegram_config(cls, config: Dict[str, Any]) -> List[str]:
        """Validate Telegram configuration dictionary."""
        errors = []

        for field in ['bot_token', 'chat_id']:
            value = config.get(field)
            if value is not None and not isinstance(value, (str, int)):
                errors.append(f"{field} must be a string")

        if 'parse_mode' in config and config['parse_mode'] not in cls.VALID_PARSE_MODES:
            errors.append(f"parse_mode must be one of: {', '.join(cls.VALID_PARSE_MODES)}")

        for field in ['request_timeout', 'poll_timeout']:
            if field in config and not cls.validate_positive_number(config[field]):
                errors.append(f"{field} must be a positive number")

        if 'enable_commands' in config and not isinstance(config['enable_commands'], bool):
            errors.append("enable_commands must be a boolean")

        return errors

    @classmethod
    def validate_dispatch_config(cls, config: Dict[str, Any]) -> List[str]:
        """Validate notification dispatch configuration dictionary."""
        errors = []

        max_queue_size = config.get('max_queue_size', 1)
        if isinstance(max_queue_size, bool) or not isinstance(max_queue_size, int) or max_queue_size < 1:
            errors.append("max_queue_size must be a positive integer")

        if 'send_timeout' in config and not cls.validate_positive_number(config['send_timeout']):
            errors.append("send_timeout must be a positive number")

        return errors

    @classmethod
    def validate_relay_config(cls, config: Dict[str, Any]) -> List[str]:
        """Validate main relay configuration dictionary."""
        errors = []

        if 'log_level' in config:
            if not cls.validate_log_level(config['log_level']):
                errors.append(
                    f"invalid log_level (must be one of: {', '.join(cls.VALID_LOG_LEVELS)})"
                )

        if 'health_port' in config and not cls.validate_port(config['health_port']):
            errors.append("health_port must be between 1 and 65535")

        if 'history_size' in config:
            size = config['history_size']
            if isinstance(size, bool) or not isinstance(size, int) or size < 1:
                errors.append("history_size must be a positive integer")

        if 'enable_health' in config and not isinstance(config['enable_health'], bool):
            errors.append("enable_health must be a boolean")

        sections = [
            ('stream', cls.validate_stream_config),
            ('telegram', cls.validate_telegram_config),
            ('dispatch', cls.validate_dispatch_config),
        ]
        for name, validator in sections:
            if name not in config:
                continue
            section = config[name]
            if not isinstance(section, dict):
                errors.append(f"{name} must be an object")
                continue
            for error in validator(section):
                errors.append(f"{name}: {error}")

        return errors

    @classmethod
    def validate_and_raise(cls, config: Dict[str, Any]) -> None:
        """Validate configuration and raise ValidationError if invalid."""
        errors = cls.validate_relay_config(config)
        if errors:
            raise ValidationError(f"Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors))
