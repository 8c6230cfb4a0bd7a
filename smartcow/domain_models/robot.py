# ==============================================================================
# ROBOT MODELS - Telemetry Tables
# ==============================================================================

from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from smartcow.domain_models.base import CreatedAtMixin, SQLBase


class RobotStatus(SQLBase):
    """Robot status; readers use the most recently updated row."""

    __tablename__ = "robot_status"

    online: Mapped[bool] = mapped_column(Boolean, nullable=False)
    battery: Mapped[int] = mapped_column(Integer, nullable=False)
    state: Mapped[str] = mapped_column(String(20), nullable=False)
    updated_at: Mapped[str] = mapped_column(String(40), nullable=False, index=True)


class RobotActivity(SQLBase, CreatedAtMixin):
    __tablename__ = "robot_activities"

    timestamp: Mapped[str] = mapped_column(String(40), nullable=False)
    waste_collected: Mapped[float] = mapped_column(Float, nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)


class RobotLog(SQLBase, CreatedAtMixin):
    __tablename__ = "robot_logs"

    timestamp: Mapped[str] = mapped_column(String(40), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
