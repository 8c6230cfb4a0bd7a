# ==============================================================================
# ORDER SERVICE - Buyer Orders & Completion Credits
# ==============================================================================
# Order placement, forward-only status transitions, revenue on completion
# ==============================================================================

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional

from smartcow.core.constants import (
    ORDER_STATUS_RANK,
    OrderStatus,
    Topics,
    selling_role_of,
    split_identity,
)
from smartcow.database.factory import StorageContext
from smartcow.database.repositories.entities import ORDERS
from smartcow.schemas.marketplace import Order, OrderCreate
from smartcow.services.base_service import BaseService
from smartcow.services.chat_service import ChatService
from smartcow.services.revenue_ledger import RevenueLedger
from smartcow.utils.helpers import generate_id, utc_now

logger = logging.getLogger(__name__)


class OrderService(BaseService):
    """
    Orders placed by buyers, stored per seller.

    Status only moves forward (pending -> processing -> completed). The
    seller's revenue is credited once, on the first transition into
    ``completed``, and only when the seller performs it. Status changes of one
    order are serialized by a per-order lock, so concurrent completions
    credit once. The status write happens before the credit; a failure in
    between leaves the ledger under-credited.
    """

    def __init__(
        self,
        context: StorageContext,
        ledger: RevenueLedger,
        chat: ChatService,
    ) -> None:
        super().__init__(context)
        self._repo = context.repository(ORDERS)
        self._ledger = ledger
        self._chat = chat
        self._status_locks: Dict[str, asyncio.Lock] = {}

    # ==========================================================================
    # ORDER PLACEMENT
    # ==========================================================================

    async def create_order(self, buyer: str, data: OrderCreate) -> Order:
        """
        Place an order and tell the seller through a system chat message.

        Args:
            buyer: Buyer's role-qualified identity
            data: Order line

        Returns:
            Stored order (status ``pending``)

        Raises:
            DatabaseError: If no store accepted the write
        """
        _, buyer_username = split_identity(buyer)
        _, seller_username = split_identity(data.seller_id)
        seller_role = selling_role_of(data.seller_id)

        order = Order(
            id=generate_id("order"),
            product_id=data.product_id,
            product_name=data.product_name,
            seller_id=data.seller_id,
            seller_role=seller_role.value if seller_role else None,
            seller_name=data.seller_name or seller_username,
            buyer_id=buyer,
            buyer_name=data.buyer_name or buyer_username,
            quantity=data.quantity,
            total_idr=data.total_idr,
            status=OrderStatus.PENDING,
            created_at=utc_now(),
        )
        stored = self._require_stored(await self._repo.add(order), "order")
        logger.info(f"Order {stored.id} placed by {buyer} for {stored.seller_id}")

        await self._chat.send_system_message(
            stored.seller_id,
            buyer,
            f"New order from {stored.buyer_name}: {stored.quantity} x "
            f"{stored.product_name} (Rp {stored.total_idr:,})",
        )
        self._notify(Topics.ORDERS, {"cpId": stored.seller_id, "buyerId": buyer})
        return stored

    # ==========================================================================
    # QUERIES
    # ==========================================================================

    async def list_seller_orders(self, seller: str) -> List[Order]:
        return await self._repo.list(seller) or []

    async def list_buyer_orders(self, buyer: str) -> List[Order]:
        """Orders of ``buyer`` across every seller, newest first."""
        orders = await self._repo.find(buyer_id=buyer) or []
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    async def get_order(self, order_id: str) -> Optional[Order]:
        return await self._repo.get(order_id)

    # ==========================================================================
    # STATUS TRANSITIONS
    # ==========================================================================

    async def update_order_status(
        self,
        actor: str,
        order_id: str,
        status: OrderStatus,
    ) -> Optional[Order]:
        """
        Move an order forward and credit revenue on completion.

        Unknown orders, orders of another seller and backward transitions
        are ignored with a warning. Re-applying the current status is a
        no-op and never credits twice.

        Returns:
            The order after the call, or None when the call was rejected
        """
        lock = self._status_locks.setdefault(order_id, asyncio.Lock())
        async with lock:
            return await self._apply_status(actor, order_id, status)

    async def _apply_status(
        self,
        actor: str,
        order_id: str,
        status: OrderStatus,
    ) -> Optional[Order]:
        order = await self._repo.get(order_id)
        if order is None:
            logger.warning(f"Order {order_id} not found")
            return None
        if order.seller_id != actor:
            logger.warning(f"{actor} cannot change order {order_id} of {order.seller_id}")
            return None

        target = OrderStatus(status).value
        current_rank = ORDER_STATUS_RANK.get(order.status, 0)
        target_rank = ORDER_STATUS_RANK[target]
        if target_rank < current_rank:
            logger.warning(f"Order {order_id}: {order.status} -> {target} is not allowed")
            return None
        if target == order.status:
            return order

        updated = await self._repo.update(order_id, {"status": target})
        if updated is None:
            logger.warning(f"Order {order_id} status change was not stored")
            return None
        logger.info(f"Order {order_id}: {order.status} -> {target}")

        if target == OrderStatus.COMPLETED.value:
            role, username = split_identity(actor)
            await self._ledger.credit(role or "", username, order.total_idr)

        self._notify(Topics.ORDERS, {"cpId": actor, "orderId": order_id, "status": target})
        return updated
