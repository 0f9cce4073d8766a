"""Tests for frame decoding into envelopes."""

import json

import pytest

from pumpportal_relay.events import (
    Envelope, EventCategory, SubscriptionMethod,
    decode_frame, parse_frame, is_acknowledgement, subscription_message
)
from pumpportal_relay.exceptions import FrameDecodeError

from tests.fixtures import ACK_FRAME, make_frame, new_token_frame


class TestDecodeFrame:
    """Tests for decode_frame()."""

    def test_decodes_new_token_frame(self):
        envelope = decode_frame(new_token_frame())

        assert envelope.discriminant == "newToken"
        assert envelope.category is EventCategory.NEW_TOKEN
        assert envelope.payload["symbol"] == "FOO"

    def test_decodes_bytes_frame(self):
        envelope = decode_frame(make_frame("raydiumLiquidity", {"name": "Bar"}).encode("utf-8"))

        assert envelope.category is EventCategory.RAYDIUM_LIQUIDITY
        assert envelope.payload == {"name": "Bar"}

    def test_unknown_method_has_no_category(self):
        envelope = decode_frame(make_frame("tokenTrade", {}))

        assert envelope.discriminant == "tokenTrade"
        assert envelope.category is None

    def test_missing_data_gives_none_payload(self):
        envelope = decode_frame(make_frame("newToken"))

        assert envelope.payload is None

    def test_invalid_json_raises(self):
        with pytest.raises(FrameDecodeError) as exc_info:
            decode_frame("{not json")

        assert exc_info.value.raw_frame == "{not json"

    def test_non_object_raises(self):
        with pytest.raises(FrameDecodeError):
            decode_frame("[1, 2, 3]")

    def test_missing_method_raises(self):
        with pytest.raises(FrameDecodeError):
            decode_frame(json.dumps({"data": {"name": "Foo"}}))

    def test_non_string_method_raises(self):
        with pytest.raises(FrameDecodeError):
            decode_frame(json.dumps({"method": 42, "data": {}}))

    def test_non_object_data_raises(self):
        with pytest.raises(FrameDecodeError):
            decode_frame(json.dumps({"method": "newToken", "data": "Foo"}))

    def test_invalid_utf8_raises(self):
        with pytest.raises(FrameDecodeError):
            decode_frame(b"\xff\xfe{}")

    @pytest.mark.parametrize("frame", [
        "1" * 5000,
        "[" * 200000 + "]" * 200000,
    ])
    def test_oversized_or_deeply_nested_json_raises_decode_error(self, frame):
        with pytest.raises(FrameDecodeError):
            parse_frame(frame)


class TestAcknowledgement:
    """Tests for subscription acknowledgement detection."""

    def test_ack_frame_is_acknowledgement(self):
        assert is_acknowledgement(parse_frame(ACK_FRAME))

    def test_event_frame_is_not_acknowledgement(self):
        assert not is_acknowledgement(parse_frame(new_token_frame()))


class TestSubscriptionMessage:
    """Tests for outbound subscription frames."""

    def test_enum_method(self):
        assert json.loads(subscription_message(SubscriptionMethod.NEW_TOKEN)) == {
            "method": "subscribeNewToken"
        }

    def test_string_method(self):
        assert json.loads(subscription_message("subscribeRaydiumLiquidity")) == {
            "method": "subscribeRaydiumLiquidity"
        }


def test_envelope_to_dict_round_trips_wire_shape():
    envelope = Envelope(discriminant="newToken", payload={"name": "Foo"})

    assert envelope.to_dict() == {"method": "newToken", "data": {"name": "Foo"}}
