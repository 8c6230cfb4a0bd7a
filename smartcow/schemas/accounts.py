# ==============================================================================
# ACCOUNT SCHEMAS - Users, Settings & Notifications
# ==============================================================================
# Account records, authentication payloads and per-user preference blobs
# ==============================================================================

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import EmailStr, Field, field_validator

from smartcow.core.constants import AccountStatus, Role, make_identity
from smartcow.schemas.base import BaseSchema


# ==============================================================================
# ACCOUNTS
# ==============================================================================

class UserAccount(BaseSchema):
    """Stored account; ``password`` is a bcrypt hash."""

    id: str
    name: str
    email: str
    password: str
    role: Role
    status: AccountStatus = AccountStatus.ACTIVE
    created_at: datetime
    last_login: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @property
    def identity(self) -> str:
        return make_identity(self.role, self.name)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class UserPublic(BaseSchema):
    """Account without its password hash."""

    id: str
    name: str
    email: str
    role: Role
    status: AccountStatus
    created_at: datetime
    last_login: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


class RegisterRequest(BaseSchema):
    """Schema for user registration."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Username, unique per role",
    )
    email: EmailStr = Field(
        ...,
        description="User email address",
    )
    password: str = Field(
        ...,
        min_length=6,
        max_length=100,
        description="Plain password",
    )
    role: Role = Field(
        ...,
        description="Requested role",
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if ":" in v:
            raise ValueError("Username must not contain ':'")
        return v


class LoginRequest(BaseSchema):
    """Schema for login request."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseSchema):
    """Schema for authentication token response."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration in seconds")
    identity: str = Field(..., description="Role-qualified identity")
    user: UserPublic


class RoleUpdate(BaseSchema):
    role: Role


class StatusUpdate(BaseSchema):
    status: AccountStatus


# ==============================================================================
# SETTINGS
# ==============================================================================

class ProfileSettings(BaseSchema):
    full_name: str = "User"
    username: str = "user"
    email: str = ""
    phone: str = ""
    address: str = ""
    profile_picture: Optional[str] = None
    show_role_label: bool = True


class SecuritySettings(BaseSchema):
    two_factor_enabled: bool = False
    two_factor_method: Optional[str] = None
    active_sessions: List[Dict[str, Any]] = Field(default_factory=list)


class NotificationPrefs(BaseSchema):
    chat: bool = True
    forum_replies: bool = True
    articles: bool = True
    marketplace: bool = True
    system: bool = True


class PrivacyPrefs(BaseSchema):
    allow_messages: bool = True
    public_profile: bool = True
    show_last_seen: bool = True
    allow_tagging: bool = True


class ActivityEntry(BaseSchema):
    id: str
    type: str
    description: str
    time: datetime


class UserSettings(BaseSchema):
    """Preference blob of one user; missing sections take their defaults."""

    profile: ProfileSettings = Field(default_factory=ProfileSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    notifications: NotificationPrefs = Field(default_factory=NotificationPrefs)
    privacy: PrivacyPrefs = Field(default_factory=PrivacyPrefs)
    role_specific: Dict[str, Any] = Field(default_factory=dict)
    dark_mode: bool = False
    activity_log: List[ActivityEntry] = Field(default_factory=list)
    last_updated: Optional[datetime] = None


class SettingsRecord(BaseSchema):
    """Stored settings row keyed by (user_id, role)."""

    id: str
    user_id: str = Field(..., description="Role-qualified identity")
    role: str
    settings: UserSettings
    updated_at: datetime


class ActivityCreate(BaseSchema):
    type: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=500)


# ==============================================================================
# NOTIFICATIONS
# ==============================================================================

class NotificationItem(BaseSchema):
    id: str
    type: str = Field(..., description="user, content, ticket or robot")
    message: str
    severity: str = Field("info", description="info, warning or urgent")
    time: datetime
    read: bool = False
    data: Optional[Any] = None


class NotificationCreate(BaseSchema):
    type: str = Field(..., min_length=1, max_length=50)
    message: str = Field(..., min_length=1)
    severity: str = "info"
    data: Optional[Any] = None
