# ==============================================================================
# ORDER & REVENUE TESTS
# ==============================================================================

from __future__ import annotations

import asyncio

import pytest

from smartcow.core.constants import OrderStatus, Topics
from smartcow.schemas.marketplace import OrderCreate


def _order(**overrides) -> OrderCreate:
    data = {
        "product_id": "prod-1",
        "product_name": "Compost A",
        "seller_id": "seller:alice",
        "quantity": 1,
        "total_idr": 50000,
    }
    data.update(overrides)
    return OrderCreate(**data)


class TestRevenueLedger:
    """Accumulating per-seller totals."""

    @pytest.mark.asyncio
    async def test_absent_total_is_zero(self, facade):
        assert facade.ledger.read("seller", "alice") == 0

    @pytest.mark.asyncio
    async def test_credit_accumulates(self, facade):
        seen = []
        facade.bus.subscribe(Topics.REVENUE, seen.append)
        assert await facade.ledger.credit("seller", "alice", 50000) == 50000
        assert await facade.ledger.credit("seller", "alice", 25000) == 75000
        assert facade.ledger.read("seller", "alice") == 75000
        assert seen[-1].payload == {"role": "seller", "userId": "alice", "total": 75000}

    @pytest.mark.asyncio
    async def test_rejected_credits(self, facade):
        assert await facade.ledger.credit("seller", "alice", 0) is None
        assert await facade.ledger.credit("seller", "alice", -5) is None
        assert await facade.ledger.credit("", "alice", 10) is None
        assert facade.ledger.read("seller", "alice") == 0

    @pytest.mark.asyncio
    async def test_totals_are_per_role(self, facade):
        await facade.ledger.credit("seller", "alice", 100)
        assert facade.ledger.read("compost_processor", "alice") == 0

    @pytest.mark.asyncio
    async def test_concurrent_credits_are_not_lost(self, facade, sibling):
        await asyncio.gather(*(
            (facade if i % 2 else sibling).ledger.credit("seller", "alice", 10)
            for i in range(20)
        ))
        assert facade.ledger.read("seller", "alice") == 200
        assert sibling.ledger.read("seller", "alice") == 200


class TestOrders:
    """Order placement and forward-only status changes."""

    @pytest.mark.asyncio
    async def test_create_order(self, facade):
        order = await facade.orders.create_order("buyer:bob", _order())
        assert order.status == OrderStatus.PENDING.value
        assert order.buyer_id == "buyer:bob"
        assert order.buyer_name == "bob"
        assert order.seller_role == "seller"
        assert [o.id for o in await facade.orders.list_seller_orders("seller:alice")] == [order.id]
        assert [o.id for o in await facade.orders.list_buyer_orders("buyer:bob")] == [order.id]

    @pytest.mark.asyncio
    async def test_create_order_messages_seller(self, facade):
        await facade.orders.create_order("buyer:bob", _order(quantity=2, total_idr=100000))
        messages = await facade.chat.get_conversation("seller:alice", "buyer:bob")
        assert len(messages) == 1
        assert messages[0].sender_name == "System"
        assert "Compost A" in messages[0].message
        assert messages[0].receiver_id == "seller:alice"

    @pytest.mark.asyncio
    async def test_completion_credits_once(self, facade):
        order = await facade.orders.create_order("buyer:bob", _order())

        await facade.orders.update_order_status("seller:alice", order.id, OrderStatus.PROCESSING)
        assert facade.ledger.read("seller", "alice") == 0

        done = await facade.orders.update_order_status("seller:alice", order.id, OrderStatus.COMPLETED)
        assert done.status == OrderStatus.COMPLETED.value
        assert facade.ledger.read("seller", "alice") == 50000

        again = await facade.orders.update_order_status("seller:alice", order.id, OrderStatus.COMPLETED)
        assert again.status == OrderStatus.COMPLETED.value
        assert facade.ledger.read("seller", "alice") == 50000

    @pytest.mark.asyncio
    async def test_pending_straight_to_completed(self, facade):
        order = await facade.orders.create_order("buyer:bob", _order(total_idr=12000))
        await facade.orders.update_order_status("seller:alice", order.id, OrderStatus.COMPLETED)
        assert facade.ledger.read("seller", "alice") == 12000

    @pytest.mark.asyncio
    async def test_backward_transition_rejected(self, facade):
        order = await facade.orders.create_order("buyer:bob", _order())
        await facade.orders.update_order_status("seller:alice", order.id, OrderStatus.COMPLETED)

        assert await facade.orders.update_order_status("seller:alice", order.id, OrderStatus.PENDING) is None
        assert (await facade.orders.get_order(order.id)).status == OrderStatus.COMPLETED.value
        assert facade.ledger.read("seller", "alice") == 50000

    @pytest.mark.asyncio
    async def test_only_seller_changes_status(self, facade):
        order = await facade.orders.create_order("buyer:bob", _order())
        assert await facade.orders.update_order_status("buyer:bob", order.id, OrderStatus.COMPLETED) is None
        assert await facade.orders.update_order_status("seller:carol", order.id, OrderStatus.COMPLETED) is None
        assert facade.ledger.read("seller", "alice") == 0

    @pytest.mark.asyncio
    async def test_unknown_order(self, facade):
        assert await facade.orders.update_order_status("seller:alice", "order-missing", OrderStatus.COMPLETED) is None

    @pytest.mark.asyncio
    async def test_compost_processor_revenue(self, facade):
        order = await facade.orders.create_order("buyer:bob", _order(seller_id="compost_processor:dana"))
        await facade.orders.update_order_status("compost_processor:dana", order.id, OrderStatus.COMPLETED)
        assert facade.ledger.read("compost_processor", "dana") == 50000
        assert facade.ledger.read("seller", "dana") == 0

    @pytest.mark.asyncio
    async def test_sibling_sees_revenue_update(self, facade, sibling):
        external = []
        sibling.bus.subscribe(Topics.REVENUE, external.append)
        order = await facade.orders.create_order("buyer:bob", _order())
        await facade.orders.update_order_status("seller:alice", order.id, OrderStatus.COMPLETED)
        assert external and external[-1].external is True
        assert sibling.ledger.read("seller", "alice") == 50000


class TestOrdersOnSQLRemote:
    """Same rules with a SQL remote store."""

    @pytest.mark.asyncio
    async def test_completion_credits_once(self, sql_facade):
        order = await sql_facade.orders.create_order("buyer:bob", _order())
        for status in (OrderStatus.PROCESSING, OrderStatus.COMPLETED, OrderStatus.COMPLETED):
            await sql_facade.orders.update_order_status("seller:alice", order.id, status)

        stored = await sql_facade.orders.get_order(order.id)
        assert stored.status == OrderStatus.COMPLETED.value
        assert sql_facade.ledger.read("seller", "alice") == 50000
        assert [o.id for o in await sql_facade.orders.list_buyer_orders("buyer:bob")] == [order.id]

    @pytest.mark.asyncio
    async def test_concurrent_completions_credit_once(self, sql_facade):
        order = await sql_facade.orders.create_order("buyer:bob", _order())
        results = await asyncio.gather(
            sql_facade.orders.update_order_status("seller:alice", order.id, OrderStatus.COMPLETED),
            sql_facade.orders.update_order_status("seller:alice", order.id, OrderStatus.COMPLETED),
        )
        assert [r.status for r in results] == [OrderStatus.COMPLETED.value] * 2
        assert sql_facade.ledger.read("seller", "alice") == 50000
