"""Custom exceptions for PumpPortal Relay."""


class RelayError(Exception):
    """Base exception for PumpPortal Relay errors."""
    pass


class ConfigurationError(RelayError):
    """Configuration related errors."""
    pass


# Stream-specific exceptions
class StreamError(RelayError):
    """Base stream related errors."""
    pass


class StreamConnectionError(StreamError):
    """Stream connection failed or was lost."""

    def __init__(self, message: str, url: str = None):
        super().__init__(message)
        self.url = url


class FrameDecodeError(StreamError):
    """Inbound frame could not be decoded into an envelope."""

    def __init__(self, message: str, raw_frame=None):
        super().__init__(message)
        self.raw_frame = raw_frame


# Notification-specific exceptions
class NotificationError(RelayError):
    """Delivery to the notification sink failed."""

    def __init__(self, message: str, status_code: int = None, response_data: dict = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data or {}


class NotificationTimeoutError(NotificationError):
    """Notification sink did not answer in time."""
    pass
