# ==============================================================================
# ROBOT ENDPOINTS - Telemetry
# ==============================================================================

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from smartcow.api.dependencies import CurrentIdentity, FacadeDep
from smartcow.core.constants import Limits
from smartcow.schemas.base import APIResponse
from smartcow.schemas.robot import (
    MinuteChartPoint,
    RobotActivity,
    RobotActivityCreate,
    RobotLog,
    RobotLogCreate,
    RobotStatus,
    RobotStatusUpdate,
)

router = APIRouter(prefix="/robot", tags=["Robot"])


@router.get(
    "/status",
    response_model=APIResponse[Optional[RobotStatus]],
    summary="Robot status",
)
async def get_status(facade: FacadeDep) -> APIResponse[Optional[RobotStatus]]:
    return APIResponse.ok(data=await facade.robot.get_status())


@router.put(
    "/status",
    response_model=APIResponse[RobotStatus],
    summary="Report robot status",
)
async def update_status(
    identity: CurrentIdentity,
    schema: RobotStatusUpdate,
    facade: FacadeDep,
) -> APIResponse[RobotStatus]:
    return APIResponse.ok(data=await facade.robot.update_status(schema))


@router.get(
    "/activities",
    response_model=APIResponse[List[RobotActivity]],
    summary="Recent activities",
)
async def list_activities(
    facade: FacadeDep,
    limit: int = Query(Limits.DEFAULT_ROBOT_QUERY_LIMIT, ge=1, le=500),
) -> APIResponse[List[RobotActivity]]:
    return APIResponse.ok(data=await facade.robot.list_activities(limit))


@router.post(
    "/activities",
    response_model=APIResponse[RobotActivity],
    status_code=status.HTTP_201_CREATED,
    summary="Record activity",
)
async def add_activity(
    identity: CurrentIdentity,
    schema: RobotActivityCreate,
    facade: FacadeDep,
) -> APIResponse[RobotActivity]:
    return APIResponse.ok(data=await facade.robot.add_activity(schema))


@router.get(
    "/logs",
    response_model=APIResponse[List[RobotLog]],
    summary="Recent logs",
)
async def list_logs(
    facade: FacadeDep,
    limit: int = Query(Limits.DEFAULT_ROBOT_QUERY_LIMIT, ge=1, le=500),
) -> APIResponse[List[RobotLog]]:
    return APIResponse.ok(data=await facade.robot.list_logs(limit))


@router.post(
    "/logs",
    response_model=APIResponse[RobotLog],
    status_code=status.HTTP_201_CREATED,
    summary="Record log line",
)
async def add_log(
    identity: CurrentIdentity,
    schema: RobotLogCreate,
    facade: FacadeDep,
) -> APIResponse[RobotLog]:
    return APIResponse.ok(data=await facade.robot.add_log(schema))


@router.get(
    "/chart",
    response_model=APIResponse[List[MinuteChartPoint]],
    summary="Minute chart",
    description="Collected kilograms per minute over the last hour.",
)
async def minute_chart(facade: FacadeDep) -> APIResponse[List[MinuteChartPoint]]:
    return APIResponse.ok(data=facade.robot.get_minute_chart())
