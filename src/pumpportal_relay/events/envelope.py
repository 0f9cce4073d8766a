"""Envelope model and frame decoding for the PumpPortal data feed."""

import json
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional, Union

from ..exceptions import FrameDecodeError


class EventCategory(Enum):
    """Event categories published by the feed (the envelope discriminant)."""
    NEW_TOKEN = "newToken"
    RAYDIUM_LIQUIDITY = "raydiumLiquidity"


class SubscriptionMethod(Enum):
    """Outbound subscription requests, one per category."""
    NEW_TOKEN = "subscribeNewToken"
    RAYDIUM_LIQUIDITY = "subscribeRaydiumLiquidity"


@dataclass(frozen=True)
class Envelope:
    """A decoded inbound event.

    ``payload`` is None when the frame carried no ``data`` object at all;
    otherwise it is the loosely-typed mapping sent upstream, where every
    field is optional.
    """
    discriminant: str
    payload: Optional[Dict[str, Any]] = None
    received_at: float = field(default_factory=time.time, compare=False)

    @property
    def category(self) -> Optional[EventCategory]:
        """Known category for this envelope, or None."""
        try:
            return EventCategory(self.discriminant)
        except ValueError:
            return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert envelope back to its wire shape."""
        data: Dict[str, Any] = {"method": self.discriminant}
        if self.payload is not None:
            data["data"] = self.payload
        return data


def subscription_message(method: Union[str, SubscriptionMethod]) -> str:
    """Encode a subscription request frame."""
    if isinstance(method, SubscriptionMethod):
        method = method.value
    return json.dumps({"method": method})


def parse_frame(raw: Union[str, bytes]) -> Dict[str, Any]:
    """Parse a raw text frame into a JSON object."""
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FrameDecodeError(f"Frame is not valid UTF-8: {e}", raw_frame=raw)

    try:
        data = json.loads(raw)
    except (ValueError, TypeError, RecursionError) as e:
        raise FrameDecodeError(f"Invalid JSON received: {e}", raw_frame=raw)

    if not isinstance(data, dict):
        raise FrameDecodeError(
            f"Frame must be a JSON object, got {type(data).__name__}", raw_frame=raw
        )

    return data


def is_acknowledgement(data: Dict[str, Any]) -> bool:
    """Subscription confirmations carry a ``message`` and no ``method``."""
    return "method" not in data and isinstance(data.get("message"), str)


def envelope_from_frame(data: Dict[str, Any]) -> Envelope:
    """Build an envelope from a parsed frame object."""
    method = data.get("method")
    if not isinstance(method, str) or not method:
        raise FrameDecodeError("Frame has no 'method' discriminant", raw_frame=data)

    payload = data.get("data")
    if payload is not None and not isinstance(payload, dict):
        raise FrameDecodeError(
            f"Frame 'data' must be an object, got {type(payload).__name__}", raw_frame=data
        )

    return Envelope(discriminant=method, payload=payload)


def decode_frame(raw: Union[str, bytes]) -> Envelope:
    """Decode a raw frame straight into an envelope."""
    return envelope_from_frame(parse_frame(raw))
