# ==============================================================================
# SYNC FACADE - Single Entry Point to the Synchronization Layer
# ==============================================================================
# Wires every domain service to one storage context
# ==============================================================================

from __future__ import annotations

import logging

from smartcow.database.factory import StorageContext
from smartcow.database.local_store import LocalRecordStore
from smartcow.events.bus import ChangeBus
from smartcow.services.account_service import AccountService
from smartcow.services.article_service import ArticleService
from smartcow.services.chat_service import ChatService
from smartcow.services.forum_service import ForumService
from smartcow.services.liked_products import LikedProductsService
from smartcow.services.notification_service import NotificationService
from smartcow.services.order_service import OrderService
from smartcow.services.overview_service import OverviewService
from smartcow.services.product_service import ProductService
from smartcow.services.revenue_ledger import RevenueLedger
from smartcow.services.robot_service import RobotService
from smartcow.services.settings_service import SettingsService

logger = logging.getLogger(__name__)


class SyncFacade:
    """
    Synchronization Facade.

    Built by ``StoreFactory`` with the remote decision already taken; the
    services only see repositories, the local store and the bus.

    Example:
        >>> facade = await StoreFactory.build(RemoteConfig.disabled())
        >>> await facade.products.create_product("seller:alice", data)
        >>> facade.ledger.read("seller", "alice")
    """

    def __init__(self, context: StorageContext) -> None:
        self.context = context
        self.products = ProductService(context)
        self.ledger = RevenueLedger(context)
        self.chat = ChatService(context)
        self.orders = OrderService(context, self.ledger, self.chat)
        self.articles = ArticleService(context)
        self.liked = LikedProductsService(context)
        self.forum = ForumService(context)
        self.settings = SettingsService(context)
        self.notifications = NotificationService(context)
        self.robot = RobotService(context)
        self.accounts = AccountService(context)
        self.overview = OverviewService(
            context, self.products, self.ledger, self.articles, self.chat
        )

    @property
    def bus(self) -> ChangeBus:
        return self.context.bus

    @property
    def store(self) -> LocalRecordStore:
        return self.context.store

    @property
    def mode(self) -> str:
        return self.context.mode

    async def close(self) -> None:
        """Disconnect the remote adapter, detach from the medium and close it if owned."""
        if self.context.adapter is not None:
            await self.context.adapter.disconnect()
        self.context.store.close()
        if self.context.owns_medium:
            self.context.store.medium.close()
        logger.info("Sync facade closed")
