# ==============================================================================
# ROBOT SERVICE - Cleaning Robot Telemetry
# ==============================================================================
# Latest status, activity and log history, per-minute collection chart
# ==============================================================================

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from smartcow.core.constants import Limits, StorageKeys, Topics
from smartcow.database.factory import StorageContext
from smartcow.database.repositories.entities import ROBOT_ACTIVITIES, ROBOT_LOGS, ROBOT_STATUS
from smartcow.schemas.robot import (
    MinuteChartPoint,
    RobotActivity,
    RobotActivityCreate,
    RobotLog,
    RobotLogCreate,
    RobotStatus,
    RobotStatusUpdate,
)
from smartcow.services.base_service import BaseService
from smartcow.utils.helpers import generate_id, minute_label, utc_now

logger = logging.getLogger(__name__)


class RobotService(BaseService):
    """
    Robot telemetry.

    The status is a single record (the most recently updated row remotely).
    Every recorded activity also feeds the minute chart, a local rolling
    window of collected kilograms per ``HH:MM`` minute.
    """

    def __init__(self, context: StorageContext) -> None:
        super().__init__(context)
        self._status = context.repository(ROBOT_STATUS)
        self._activities = context.repository(ROBOT_ACTIVITIES)
        self._logs = context.repository(ROBOT_LOGS)

    # ==========================================================================
    # STATUS
    # ==========================================================================

    async def get_status(self) -> Optional[RobotStatus]:
        records = await self._status.list(limit=1)
        return records[0] if records else None

    async def update_status(self, data: RobotStatusUpdate) -> RobotStatus:
        """
        Replace the robot status.

        Raises:
            DatabaseError: If no store accepted the write
        """
        current = await self.get_status()
        status = RobotStatus(
            id=current.id if current else generate_id("robot"),
            online=data.online,
            battery=data.battery,
            state=data.state,
            updated_at=utc_now(),
        )
        stored = self._require_stored(await self._status.upsert(status), "robot status")
        self._notify(Topics.ROBOT, {"kind": "status"})
        return stored

    # ==========================================================================
    # ACTIVITIES & LOGS
    # ==========================================================================

    async def list_activities(self, limit: int = Limits.DEFAULT_ROBOT_QUERY_LIMIT) -> List[RobotActivity]:
        """Most recent activities first."""
        return await self._activities.list(limit=limit) or []

    async def add_activity(self, data: RobotActivityCreate) -> RobotActivity:
        now = utc_now()
        activity = RobotActivity(
            id=generate_id("ract"),
            timestamp=data.timestamp or now,
            waste_collected=data.waste_collected,
            location=data.location,
            created_at=now,
        )
        stored = self._require_stored(await self._activities.add(activity), "robot activity")
        self.record_collection(stored.waste_collected, stored.timestamp)
        self._notify(Topics.ROBOT, {"kind": "activity"})
        return stored

    async def list_logs(self, limit: int = Limits.DEFAULT_ROBOT_QUERY_LIMIT) -> List[RobotLog]:
        return await self._logs.list(limit=limit) or []

    async def add_log(self, data: RobotLogCreate) -> RobotLog:
        now = utc_now()
        entry = RobotLog(
            id=generate_id("rlog"),
            timestamp=data.timestamp or now,
            message=data.message,
            type=data.type,
            created_at=now,
        )
        stored = self._require_stored(await self._logs.add(entry), "robot log")
        self._notify(Topics.ROBOT, {"kind": "log"})
        return stored

    # ==========================================================================
    # MINUTE CHART
    # ==========================================================================

    def _load_chart(self) -> List[MinuteChartPoint]:
        raw = self._store.read(StorageKeys.ROBOT_MINUTE_CHART, [])
        if not isinstance(raw, list):
            return []
        points: List[MinuteChartPoint] = []
        for entry in raw:
            try:
                points.append(MinuteChartPoint.model_validate(entry))
            except PydanticValidationError:
                logger.warning("Dropping unreadable minute chart point")
        return points

    @staticmethod
    def _within_window(points: List[MinuteChartPoint], now: datetime) -> List[MinuteChartPoint]:
        cutoff = now - timedelta(minutes=Limits.ROBOT_CHART_WINDOW_MINUTES)
        return sorted((p for p in points if p.timestamp >= cutoff), key=lambda p: p.timestamp)

    def record_collection(self, kilograms: float, at: Optional[datetime] = None) -> List[MinuteChartPoint]:
        """Add ``kilograms`` to the bucket of the minute ``at`` falls in."""
        at = at or utc_now()
        if at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)
        label = minute_label(at)
        points = self._within_window(self._load_chart(), at)
        for index, point in enumerate(points):
            if point.time == label:
                points[index] = point.model_copy(
                    update={"collected_kg": round(point.collected_kg + kilograms, 3)}
                )
                break
        else:
            points.append(MinuteChartPoint(
                time=label,
                collected_kg=kilograms,
                timestamp=at.replace(second=0, microsecond=0),
            ))
        self._store.write(StorageKeys.ROBOT_MINUTE_CHART, [p.to_local() for p in points])
        return points

    def get_minute_chart(self, now: Optional[datetime] = None) -> List[MinuteChartPoint]:
        """Points of the last hour, oldest first."""
        return self._within_window(self._load_chart(), now or utc_now())
