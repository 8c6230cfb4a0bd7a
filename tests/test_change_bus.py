# ==============================================================================
# CHANGE BUS TESTS
# ==============================================================================

from __future__ import annotations

import pytest

from smartcow.core.constants import Topics, topic_for_key
from smartcow.events.bus import ChangeBus, TopicCursor
from smartcow.schemas.marketplace import ProductCreate


class TestChangeBus:
    """Sequenced publish/subscribe."""

    def test_sequences_are_per_topic(self):
        bus = ChangeBus()
        assert bus.notify(Topics.MARKETPLACE).sequence == 1
        assert bus.notify(Topics.MARKETPLACE).sequence == 2
        assert bus.notify(Topics.REVENUE).sequence == 1
        assert bus.current_sequence(Topics.MARKETPLACE) == 2
        assert bus.current_sequence(Topics.LIKED_PRODUCTS) == 0

    def test_subscribe_and_unsubscribe(self):
        bus = ChangeBus()
        seen = []
        unsubscribe = bus.subscribe(Topics.MARKETPLACE, seen.append)
        bus.notify(Topics.MARKETPLACE, {"cpId": "seller:alice"})
        unsubscribe()
        bus.notify(Topics.MARKETPLACE, {"cpId": "seller:alice"})

        assert len(seen) == 1
        assert seen[0].payload == {"cpId": "seller:alice"}
        assert seen[0].external is False

    def test_wildcard_receives_every_topic(self):
        bus = ChangeBus()
        seen = []
        bus.subscribe(ChangeBus.WILDCARD, seen.append)
        bus.notify(Topics.ORDERS)
        bus.notify(Topics.CHAT)
        assert [n.topic for n in seen] == [Topics.ORDERS, Topics.CHAT]

    def test_failing_handler_does_not_stop_others(self):
        bus = ChangeBus()
        seen = []

        def broken(_):
            raise RuntimeError("boom")

        bus.subscribe(Topics.REVENUE, broken)
        bus.subscribe(Topics.REVENUE, seen.append)
        bus.notify(Topics.REVENUE)
        assert len(seen) == 1


class TestTopicCursor:
    """Gap detection."""

    def test_detects_missed_notifications(self):
        bus = ChangeBus()
        cursor = TopicCursor(Topics.MARKETPLACE)
        first = bus.notify(Topics.MARKETPLACE)
        bus.notify(Topics.MARKETPLACE)
        third = bus.notify(Topics.MARKETPLACE)

        assert cursor.advance(first) == 0
        assert cursor.advance(third) == 1
        assert cursor.last_seen == 3

    def test_stale_notification_is_negative(self):
        bus = ChangeBus()
        cursor = TopicCursor(Topics.ORDERS)
        old = bus.notify(Topics.ORDERS)
        new = bus.notify(Topics.ORDERS)
        cursor.advance(new)
        assert cursor.advance(old) < 0
        assert cursor.last_seen == 2

    def test_rejects_other_topic(self):
        cursor = TopicCursor(Topics.ORDERS)
        with pytest.raises(ValueError):
            cursor.advance(ChangeBus().notify(Topics.CHAT))


class TestKeyTopics:
    def test_keys_map_to_topics(self):
        assert topic_for_key("smartcow_marketplace_products") == Topics.MARKETPLACE
        assert topic_for_key("smartcow_cp_products:seller:alice") == Topics.MARKETPLACE
        assert topic_for_key("smartcow_revenue:seller:alice") == Topics.REVENUE
        assert topic_for_key("smartcow_liked_products:buyer:bob") == Topics.LIKED_PRODUCTS
        assert topic_for_key("unrelated") is None


class TestCrossTab:
    """Writes in one facade surface as external notifications in a sibling."""

    @pytest.mark.asyncio
    async def test_sibling_sees_marketplace_change(self, facade, sibling):
        external = []
        local = []
        sibling.bus.subscribe(Topics.MARKETPLACE, external.append)
        facade.bus.subscribe(Topics.MARKETPLACE, local.append)

        await facade.products.create_product(
            "seller:alice",
            ProductCreate(name="Compost A", price=50000, stock=10),
        )

        assert external and all(n.external for n in external)
        assert local and not any(n.external for n in local)
        assert [p.name for p in sibling.products.read_snapshot()] == ["Compost A"]
