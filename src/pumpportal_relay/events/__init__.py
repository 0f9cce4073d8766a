"""Inbound event envelopes and frame decoding."""

from .envelope import (
    Envelope, EventCategory, SubscriptionMethod,
    decode_frame, parse_frame, envelope_from_frame,
    is_acknowledgement, subscription_message
)

__all__ = [
    'Envelope', 'EventCategory', 'SubscriptionMethod',
    'decode_frame', 'parse_frame', 'envelope_from_frame',
    'is_acknowledgement', 'subscription_message'
]
