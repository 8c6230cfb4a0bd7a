# ==============================================================================
# SCHEMAS PACKAGE INITIALIZATION
# ==============================================================================

"""
Pydantic Schemas
================

Domain records and request/response schemas:
- Base: common configuration and response wrappers
- Marketplace: products, orders, overview
- Articles: educational content
- Community: chat, forum
- Accounts: users, settings, notifications
- Robot: telemetry
"""

from smartcow.schemas.base import BaseSchema, APIResponse, HealthResponse
from smartcow.schemas.marketplace import (
    Product,
    ProductCreate,
    ProductUpdate,
    Order,
    OrderCreate,
    OrderStatusUpdate,
    Overview,
)
from smartcow.schemas.articles import Article, ArticleCreate
from smartcow.schemas.community import (
    ChatMessage,
    ChatMessageCreate,
    ForumDiscussion,
    ForumDiscussionCreate,
    ForumComment,
    ForumCommentCreate,
)
from smartcow.schemas.accounts import (
    UserAccount,
    UserPublic,
    RegisterRequest,
    LoginRequest,
    TokenResponse,
    RoleUpdate,
    StatusUpdate,
    UserSettings,
    SettingsRecord,
    ActivityEntry,
    ActivityCreate,
    NotificationItem,
    NotificationCreate,
)
from smartcow.schemas.robot import (
    RobotStatus,
    RobotStatusUpdate,
    RobotActivity,
    RobotActivityCreate,
    RobotLog,
    RobotLogCreate,
    MinuteChartPoint,
)

__all__ = [
    "BaseSchema",
    "APIResponse",
    "HealthResponse",
    "Product",
    "ProductCreate",
    "ProductUpdate",
    "Order",
    "OrderCreate",
    "OrderStatusUpdate",
    "Overview",
    "Article",
    "ArticleCreate",
    "ChatMessage",
    "ChatMessageCreate",
    "ForumDiscussion",
    "ForumDiscussionCreate",
    "ForumComment",
    "ForumCommentCreate",
    "UserAccount",
    "UserPublic",
    "RegisterRequest",
    "LoginRequest",
    "TokenResponse",
    "RoleUpdate",
    "StatusUpdate",
    "UserSettings",
    "SettingsRecord",
    "ActivityEntry",
    "ActivityCreate",
    "NotificationItem",
    "NotificationCreate",
    "RobotStatus",
    "RobotStatusUpdate",
    "RobotActivity",
    "RobotActivityCreate",
    "RobotLog",
    "RobotLogCreate",
    "MinuteChartPoint",
]
