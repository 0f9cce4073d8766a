"""Tests for EventRouter."""

from unittest.mock import Mock

import pytest

from pumpportal_relay.events import Envelope, EventCategory
from pumpportal_relay.router import EventRouter

from tests.fixtures import NEW_TOKEN_PAYLOAD, RAYDIUM_PAYLOAD


@pytest.fixture
def deliver():
    return Mock()


@pytest.fixture
def router(history, deliver):
    return EventRouter(history, deliver)


class TestRouteKnownCategories:
    """Tests for envelopes with a recognised discriminant."""

    def test_new_token_scenario(self, router, history, deliver):
        history.push("newToken", "older")
        envelope = Envelope("newToken", {"name": "Foo", "symbol": "FOO", "mint": "ABC123"})

        message = router.route(envelope)

        assert "Foo" in message and "FOO" in message and "ABC123" in message
        ring = history.snapshot(EventCategory.NEW_TOKEN)
        assert len(ring) == 2
        assert ring[0] == message
        deliver.assert_called_once_with(message)

    def test_raydium_goes_to_its_own_ring(self, router, history):
        router.route(Envelope("raydiumLiquidity", RAYDIUM_PAYLOAD))

        assert len(history.snapshot(EventCategory.RAYDIUM_LIQUIDITY)) == 1
        assert history.snapshot(EventCategory.NEW_TOKEN) == ()

    def test_ring_keeps_five_most_recent(self, router, history):
        for i in range(7):
            router.route(Envelope("newToken", {**NEW_TOKEN_PAYLOAD, "name": f"Token{i}"}))

        ring = history.snapshot(EventCategory.NEW_TOKEN)
        assert len(ring) == 5
        assert "Token6" in ring[0]
        assert "Token2" in ring[4]
        assert not any("Token1" in entry for entry in ring)

    def test_missing_fields_render_with_placeholders(self, router):
        message = router.route(Envelope("newToken", {"name": "Foo"}))

        assert "💠 *Symbol*: Unknown" in message


class TestRouteUnhandled:
    """Tests for envelopes that must have no side effects."""

    def test_unknown_discriminant_has_no_side_effect(self, router, history, deliver):
        result = router.route(Envelope("tokenTrade", {"name": "Foo"}))

        assert result is None
        assert history.get_stats() == {"newToken": 0, "raydiumLiquidity": 0}
        deliver.assert_not_called()
        assert router.events_unhandled == 1

    def test_known_discriminant_without_payload_is_dropped(self, router, history, deliver):
        result = router.route(Envelope("newToken", None))

        assert result is None
        assert history.snapshot("newToken") == ()
        deliver.assert_not_called()


class TestRouteFailures:
    """Tests for failure isolation inside route()."""

    def test_sink_failure_does_not_escape_and_ring_is_updated(self, history):
        deliver = Mock(side_effect=RuntimeError("sink down"))
        router = EventRouter(history, deliver)

        message = router.route(Envelope("newToken", NEW_TOKEN_PAYLOAD))

        assert history.snapshot("newToken") == (message,)
        assert router.delivery_failures == 1

    def test_renderer_failure_is_contained(self, history, deliver):
        def broken(payload):
            raise KeyError("boom")

        router = EventRouter(history, deliver, renderers={EventCategory.NEW_TOKEN: broken})

        assert router.route(Envelope("newToken", {})) is None
        assert history.snapshot("newToken") == ()
        deliver.assert_not_called()
        assert router.render_failures == 1

    def test_known_categories(self, router):
        assert set(router.known_categories) == {"newToken", "raydiumLiquidity"}


def test_stats_include_history(history, deliver):
    router = EventRouter(history, deliver)
    router.route(Envelope("newToken", NEW_TOKEN_PAYLOAD))

    stats = router.get_stats()

    assert stats["events_routed"] == 1
    assert stats["history"]["newToken"] == 1
