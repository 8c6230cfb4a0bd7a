# ==============================================================================
# ENTITY SPECS - Storage Layout of Every Repository-Backed Entity
# ==============================================================================

from __future__ import annotations

from smartcow.core.constants import ArticleStatus, StorageKeys, Tables
from smartcow.database.repositories.base_repository import EntitySpec
from smartcow.schemas.accounts import SettingsRecord, UserAccount
from smartcow.schemas.articles import Article
from smartcow.schemas.community import ChatMessage, ForumComment, ForumDiscussion
from smartcow.schemas.marketplace import Order, Product
from smartcow.schemas.robot import RobotActivity, RobotLog, RobotStatus


# Per-owner catalogs: smartcow_cp_products:<identity>, creation order
PRODUCTS = EntitySpec(
    name="products",
    model=Product,
    local_key=StorageKeys.CP_PRODUCTS_PREFIX,
    table=Tables.PRODUCTS,
    scope_field="seller_id",
    partitioned=True,
    newest_first=False,
)

# Per-seller orders: smartcow_cp_orders:<identity>, newest first
ORDERS = EntitySpec(
    name="orders",
    model=Order,
    local_key=StorageKeys.CP_ORDERS_PREFIX,
    table=Tables.ORDERS,
    scope_field="seller_id",
    partitioned=True,
)

# Author drafts never leave the local store
DRAFT_ARTICLES = EntitySpec(
    name="draft articles",
    model=Article,
    local_key=StorageKeys.CP_EDU_PREFIX,
    scope_field="author_id",
    partitioned=True,
)

PENDING_ARTICLES = EntitySpec(
    name="pending articles",
    model=Article,
    local_key=StorageKeys.PENDING_ARTICLES,
    table=Tables.PENDING_ARTICLES,
    scope_field="author_id",
    remote_defaults={"status": ArticleStatus.PENDING.value},
)

PUBLISHED_ARTICLES = EntitySpec(
    name="published articles",
    model=Article,
    local_key=StorageKeys.PUBLISHED_ARTICLES,
    table=Tables.EDUCATIONAL_ARTICLES,
    scope_field="author_id",
    remote_defaults={"status": ArticleStatus.PUBLISHED.value},
)

# One chat log; conversations read oldest first
CHAT_MESSAGES = EntitySpec(
    name="chat messages",
    model=ChatMessage,
    local_key=StorageKeys.CHAT_MESSAGES,
    table=Tables.CHAT_MESSAGES,
    scope_field="conversation_id",
    newest_first=False,
)

FORUM_DISCUSSIONS = EntitySpec(
    name="forum discussions",
    model=ForumDiscussion,
    local_key=StorageKeys.FORUM_DISCUSSIONS,
    table=Tables.FORUM_DISCUSSIONS,
)

FORUM_COMMENTS = EntitySpec(
    name="forum comments",
    model=ForumComment,
    local_key=StorageKeys.FORUM_COMMENTS,
    table=Tables.FORUM_COMMENTS,
    scope_field="discussion_id",
    newest_first=False,
)

USERS = EntitySpec(
    name="users",
    model=UserAccount,
    local_key=StorageKeys.USERS,
    table=Tables.USERS,
    scope_field="role",
)

# smartcow_settings:<identity> holds one record
USER_SETTINGS = EntitySpec(
    name="user settings",
    model=SettingsRecord,
    local_key=StorageKeys.SETTINGS_PREFIX,
    table=Tables.USER_SETTINGS,
    scope_field="user_id",
    partitioned=True,
    single=True,
    order_by="updated_at",
)

ROBOT_STATUS = EntitySpec(
    name="robot status",
    model=RobotStatus,
    local_key=StorageKeys.ROBOT_STATUS,
    table=Tables.ROBOT_STATUS,
    single=True,
    order_by="updated_at",
)

ROBOT_ACTIVITIES = EntitySpec(
    name="robot activities",
    model=RobotActivity,
    local_key=StorageKeys.ROBOT_ACTIVITIES,
    table=Tables.ROBOT_ACTIVITIES,
)

ROBOT_LOGS = EntitySpec(
    name="robot logs",
    model=RobotLog,
    local_key=StorageKeys.ROBOT_LOGS,
    table=Tables.ROBOT_LOGS,
)

ALL_ENTITIES = (
    PRODUCTS,
    ORDERS,
    DRAFT_ARTICLES,
    PENDING_ARTICLES,
    PUBLISHED_ARTICLES,
    CHAT_MESSAGES,
    FORUM_DISCUSSIONS,
    FORUM_COMMENTS,
    USERS,
    USER_SETTINGS,
    ROBOT_STATUS,
    ROBOT_ACTIVITIES,
    ROBOT_LOGS,
)
