# ==============================================================================
# SERVICES PACKAGE - Synchronization Facade
# ==============================================================================

"""
Domain services aggregated by SyncFacade.

Components:
    - ProductService: Catalogs and marketplace snapshot
    - OrderService: Orders, forward-only status, completion credits
    - RevenueLedger: Per-seller accumulating totals
    - ArticleService: Drafts, moderation and publication
    - LikedProductsService: Per-user liked product sets
    - ChatService / ForumService: Community messaging
    - SettingsService / NotificationService: Per-user preferences
    - RobotService: Robot telemetry
    - AccountService: Registration, login and user administration
    - OverviewService: Dashboard totals
"""

from smartcow.services.account_service import AccountService
from smartcow.services.article_service import ArticleService
from smartcow.services.base_service import BaseService
from smartcow.services.chat_service import ChatService
from smartcow.services.facade import SyncFacade
from smartcow.services.forum_service import ForumService
from smartcow.services.liked_products import LikedProductsService
from smartcow.services.notification_service import NotificationService
from smartcow.services.order_service import OrderService
from smartcow.services.overview_service import OverviewService
from smartcow.services.product_service import ProductService, build_snapshot
from smartcow.services.revenue_ledger import RevenueLedger
from smartcow.services.robot_service import RobotService
from smartcow.services.settings_service import SettingsService

__all__ = [
    "AccountService",
    "ArticleService",
    "BaseService",
    "ChatService",
    "ForumService",
    "LikedProductsService",
    "NotificationService",
    "OrderService",
    "OverviewService",
    "ProductService",
    "RevenueLedger",
    "RobotService",
    "SettingsService",
    "SyncFacade",
    "build_snapshot",
]
