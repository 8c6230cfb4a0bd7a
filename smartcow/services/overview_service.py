# ==============================================================================
# OVERVIEW SERVICE - Seller Dashboard Totals
# ==============================================================================

from __future__ import annotations

from smartcow.core.constants import split_identity
from smartcow.database.factory import StorageContext
from smartcow.schemas.marketplace import Overview
from smartcow.services.article_service import ArticleService
from smartcow.services.base_service import BaseService
from smartcow.services.chat_service import ChatService
from smartcow.services.product_service import ProductService
from smartcow.services.revenue_ledger import RevenueLedger


class OverviewService(BaseService):
    """Read-only totals assembled from the other services."""

    def __init__(
        self,
        context: StorageContext,
        products: ProductService,
        ledger: RevenueLedger,
        articles: ArticleService,
        chat: ChatService,
    ) -> None:
        super().__init__(context)
        self._products = products
        self._ledger = ledger
        self._articles = articles
        self._chat = chat

    async def get_overview(self, owner: str) -> Overview:
        role, username = split_identity(owner)
        return Overview(
            total_products=len(await self._products.list_products(owner)),
            total_sales_idr=self._ledger.read(role or "", username),
            educational_posts=len(await self._articles.list_author_articles(owner)),
            inquiries=await self._chat.count_received(owner),
        )
