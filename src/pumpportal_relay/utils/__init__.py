"""Utility modules for PumpPortal Relay."""

from .validation import ConfigValidator, ValidationError

__all__ = [
    'ConfigValidator',
    'ValidationError',
]
