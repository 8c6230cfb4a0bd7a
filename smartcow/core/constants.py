# ==============================================================================
# APPLICATION CONSTANTS - Centralized Configuration Values
# ==============================================================================
# Storage key namespace, remote table names, event topics and domain enums
# ==============================================================================

from __future__ import annotations

from enum import Enum
from typing import Final, Optional, Tuple


# ==============================================================================
# ROLES & IDENTITIES
# ==============================================================================

class Role(str, Enum):
    """User roles; the value is the prefix of a role-qualified identity."""

    FARMER = "farmer"
    COMPOST_PROCESSOR = "compost_processor"
    SELLER = "seller"
    BUYER = "buyer"
    ADMIN = "admin"


# Roles allowed to own products and receive revenue
SELLING_ROLES: Final[Tuple[Role, ...]] = (Role.SELLER, Role.COMPOST_PROCESSOR)


def make_identity(role: str, username: str) -> str:
    """Build a role-qualified identity such as ``seller:alice``."""
    return f"{role}:{username}"


def split_identity(identity: str) -> Tuple[Optional[str], str]:
    """
    Split a role-qualified identity into ``(role, username)``.

    Identities without a role prefix return ``(None, identity)``. Only the
    first colon separates the role; usernames may contain colons.
    """
    if ":" not in identity:
        return None, identity
    role, _, username = identity.partition(":")
    return role, username or identity


def selling_role_of(identity: str) -> Optional[Role]:
    """Return the selling role encoded in an identity, if any."""
    role, _ = split_identity(identity)
    for candidate in SELLING_ROLES:
        if role == candidate.value:
            return candidate
    return None


# ==============================================================================
# STATUS ENUMS
# ==============================================================================

class ProductStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ProductCategory(str, Enum):
    COMPOST = "compost"
    FERTILIZER = "fertilizer"
    PROCESSED = "processed"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"


# Forward-only ordering of order statuses
ORDER_STATUS_RANK: Final[dict] = {
    OrderStatus.PENDING.value: 0,
    OrderStatus.PROCESSING.value: 1,
    OrderStatus.COMPLETED.value: 2,
}


class ArticleStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    PUBLISHED = "published"
    REJECTED = "rejected"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    BANNED = "banned"
    SUSPENDED = "suspended"


class RobotState(str, Enum):
    IDLE = "idle"
    CLEANING = "cleaning"
    CHARGING = "charging"
    OFFLINE = "offline"


# ==============================================================================
# LOCAL STORAGE KEY NAMESPACE
# ==============================================================================

class StorageKeys:
    """Local store key prefixes and fixed keys."""

    CP_PRODUCTS_PREFIX: Final[str] = "smartcow_cp_products:"
    MARKETPLACE_PRODUCTS: Final[str] = "smartcow_marketplace_products"
    CP_EDU_PREFIX: Final[str] = "smartcow_cp_education:"
    PENDING_ARTICLES: Final[str] = "smartcow_pending_articles"
    PUBLISHED_ARTICLES: Final[str] = "smartcow_articles"
    CP_ORDERS_PREFIX: Final[str] = "smartcow_cp_orders:"
    REVENUE_PREFIX: Final[str] = "smartcow_revenue:"
    CHAT_MESSAGES: Final[str] = "smartcow_chat_messages"
    LIKED_PRODUCTS_PREFIX: Final[str] = "smartcow_liked_products:"
    SETTINGS_PREFIX: Final[str] = "smartcow_settings:"
    NOTIFICATIONS_PREFIX: Final[str] = "smartcow_notifications:"
    FORUM_DISCUSSIONS: Final[str] = "smartcow_forum_discussions"
    FORUM_COMMENTS: Final[str] = "smartcow_forum_comments"
    USERS: Final[str] = "smartcow_users"
    ROBOT_STATUS: Final[str] = "smartcow_robot_status"
    ROBOT_ACTIVITIES: Final[str] = "smartcow_robot_activities"
    ROBOT_LOGS: Final[str] = "smartcow_robot_logs"
    ROBOT_MINUTE_CHART: Final[str] = "ROBOT_MINUTE_CHART"


# ==============================================================================
# REMOTE TABLES
# ==============================================================================

class Tables:
    """Remote relational table names."""

    USERS: Final[str] = "users"
    PRODUCTS: Final[str] = "products"
    ORDERS: Final[str] = "orders"
    FORUM_DISCUSSIONS: Final[str] = "forum_discussions"
    FORUM_COMMENTS: Final[str] = "forum_comments"
    CHAT_MESSAGES: Final[str] = "chat_messages"
    EDUCATIONAL_ARTICLES: Final[str] = "educational_articles"
    PENDING_ARTICLES: Final[str] = "pending_articles"
    ROBOT_STATUS: Final[str] = "robot_status"
    ROBOT_ACTIVITIES: Final[str] = "robot_activities"
    ROBOT_LOGS: Final[str] = "robot_logs"
    USER_SETTINGS: Final[str] = "user_settings"


# ==============================================================================
# CHANGE NOTIFICATION TOPICS
# ==============================================================================

class Topics:
    """Change notification bus topics."""

    MARKETPLACE: Final[str] = "smartcow_marketplace_updated"
    REVENUE: Final[str] = "smartcow_revenue_updated"
    LIKED_PRODUCTS: Final[str] = "smartcow_liked_products_updated"
    ORDERS: Final[str] = "smartcow_orders_updated"
    ARTICLES: Final[str] = "smartcow_articles_updated"
    CHAT: Final[str] = "smartcow_chat_updated"
    FORUM: Final[str] = "smartcow_forum_updated"
    SETTINGS: Final[str] = "smartcow_settings_updated"
    NOTIFICATIONS: Final[str] = "smartcow_notifications_updated"
    ROBOT: Final[str] = "smartcow_robot_updated"
    USERS: Final[str] = "smartcow_users_updated"

    @classmethod
    def all_topics(cls) -> list[str]:
        """Get every known topic."""
        return [
            cls.MARKETPLACE, cls.REVENUE, cls.LIKED_PRODUCTS, cls.ORDERS,
            cls.ARTICLES, cls.CHAT, cls.FORUM, cls.SETTINGS,
            cls.NOTIFICATIONS, cls.ROBOT, cls.USERS,
        ]


# Storage key prefix -> topic fired in sibling stores when that key changes.
# Longest prefixes first so that fixed keys win over shared prefixes.
KEY_TOPICS: Final[Tuple[Tuple[str, str], ...]] = (
    (StorageKeys.MARKETPLACE_PRODUCTS, Topics.MARKETPLACE),
    (StorageKeys.CP_PRODUCTS_PREFIX, Topics.MARKETPLACE),
    (StorageKeys.LIKED_PRODUCTS_PREFIX, Topics.LIKED_PRODUCTS),
    (StorageKeys.REVENUE_PREFIX, Topics.REVENUE),
    (StorageKeys.CP_ORDERS_PREFIX, Topics.ORDERS),
    (StorageKeys.PENDING_ARTICLES, Topics.ARTICLES),
    (StorageKeys.CP_EDU_PREFIX, Topics.ARTICLES),
    (StorageKeys.PUBLISHED_ARTICLES, Topics.ARTICLES),
    (StorageKeys.CHAT_MESSAGES, Topics.CHAT),
    (StorageKeys.FORUM_DISCUSSIONS, Topics.FORUM),
    (StorageKeys.FORUM_COMMENTS, Topics.FORUM),
    (StorageKeys.SETTINGS_PREFIX, Topics.SETTINGS),
    (StorageKeys.NOTIFICATIONS_PREFIX, Topics.NOTIFICATIONS),
    (StorageKeys.USERS, Topics.USERS),
    (StorageKeys.ROBOT_STATUS, Topics.ROBOT),
    (StorageKeys.ROBOT_ACTIVITIES, Topics.ROBOT),
    (StorageKeys.ROBOT_LOGS, Topics.ROBOT),
    (StorageKeys.ROBOT_MINUTE_CHART, Topics.ROBOT),
)


def topic_for_key(key: str) -> Optional[str]:
    """Resolve the bus topic for a storage key, or None if unmapped."""
    for prefix, topic in KEY_TOPICS:
        if key.startswith(prefix):
            return topic
    return None


# ==============================================================================
# LIMITS
# ==============================================================================

class Limits:
    """Size limits carried over from the dashboards."""

    ACTIVITY_LOG_MAX: Final[int] = 100
    ROBOT_CHART_WINDOW_MINUTES: Final[int] = 60
    DEFAULT_ROBOT_QUERY_LIMIT: Final[int] = 50


# ==============================================================================
# ERROR MESSAGES
# ==============================================================================

class ErrorMessages:
    """Standardized error messages."""

    INVALID_CREDENTIALS: Final[str] = "Invalid email or password"
    ACCOUNT_DISABLED: Final[str] = "Account is not active"
    EMAIL_TAKEN: Final[str] = "Email already registered"
    USERNAME_TAKEN: Final[str] = "Username already taken for this role"
    ADMIN_REGISTRATION: Final[str] = "Registering as admin is not allowed"
    SELLER_ONLY: Final[str] = "Only Seller or Compost Processor can create products"
    ADMIN_ONLY: Final[str] = "Only administrators can moderate content"
    PERMISSION_DENIED: Final[str] = "You don't have permission to perform this action"
