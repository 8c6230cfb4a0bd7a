# ==============================================================================
# ROBOT SCHEMAS - Telemetry
# ==============================================================================

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from smartcow.core.constants import RobotState
from smartcow.schemas.base import BaseSchema


class RobotStatus(BaseSchema):
    id: str
    online: bool
    battery: int = Field(..., ge=0, le=100)
    state: RobotState
    updated_at: datetime


class RobotStatusUpdate(BaseSchema):
    online: bool
    battery: int = Field(..., ge=0, le=100)
    state: RobotState


class RobotActivity(BaseSchema):
    id: str
    timestamp: datetime
    waste_collected: float = Field(..., ge=0)
    location: Optional[str] = None
    created_at: datetime


class RobotActivityCreate(BaseSchema):
    waste_collected: float = Field(..., ge=0, description="Collected waste in kg")
    location: Optional[str] = None
    timestamp: Optional[datetime] = None


class RobotLog(BaseSchema):
    id: str
    timestamp: datetime
    message: str
    type: str = Field("info", description="info, warning or error")
    created_at: datetime


class RobotLogCreate(BaseSchema):
    message: str = Field(..., min_length=1)
    type: str = "info"
    timestamp: Optional[datetime] = None


class MinuteChartPoint(BaseSchema):
    """Waste collected within one ``HH:MM`` minute."""

    time: str
    collected_kg: float = 0.0
    timestamp: datetime
