# ==============================================================================
# DOMAIN MODELS PACKAGE INITIALIZATION
# ==============================================================================

"""
Domain Models
=============

SQLAlchemy models for the remote relational schema (snake_case columns):
- Product/Order: marketplace catalogs and orders
- EducationalArticle/PendingArticle: published and queued articles
- ForumDiscussion/ForumComment/ChatMessage: community records
- User/UserSettings: accounts and settings blobs
- RobotStatus/RobotActivity/RobotLog: robot telemetry
"""

from smartcow.domain_models.base import SQLBase, CreatedAtMixin, table_columns
from smartcow.domain_models.marketplace import Product, Order
from smartcow.domain_models.content import (
    EducationalArticle,
    PendingArticle,
    ForumDiscussion,
    ForumComment,
    ChatMessage,
)
from smartcow.domain_models.accounts import User, UserSettings
from smartcow.domain_models.robot import RobotStatus, RobotActivity, RobotLog

# Remote table name -> model
TABLE_MODELS = {
    model.__tablename__: model
    for model in (
        Product,
        Order,
        EducationalArticle,
        PendingArticle,
        ForumDiscussion,
        ForumComment,
        ChatMessage,
        User,
        UserSettings,
        RobotStatus,
        RobotActivity,
        RobotLog,
    )
}

__all__ = [
    "SQLBase",
    "CreatedAtMixin",
    "table_columns",
    "TABLE_MODELS",
    "Product",
    "Order",
    "EducationalArticle",
    "PendingArticle",
    "ForumDiscussion",
    "ForumComment",
    "ChatMessage",
    "User",
    "UserSettings",
    "RobotStatus",
    "RobotActivity",
    "RobotLog",
]
