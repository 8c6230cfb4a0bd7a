# ==============================================================================
# ACCOUNT MODELS - Users & Settings
# ==============================================================================

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import JSON, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from smartcow.domain_models.base import CreatedAtMixin, SQLBase


class User(SQLBase, CreatedAtMixin):
    """
    User account row.

    Emails are stored lowercase; ``name`` is unique per role. Soft-deleted
    accounts keep their row with ``deleted_at`` set.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    last_login: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    deleted_at: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)


class UserSettings(SQLBase):
    """Settings blob, one row per (user_id, role)."""

    __tablename__ = "user_settings"
    __table_args__ = (UniqueConstraint("user_id", "role"),)

    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False)
    settings: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[str] = mapped_column(String(40), nullable=False)
