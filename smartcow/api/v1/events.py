# ==============================================================================
# EVENT ENDPOINTS - Change Sequences for Polling Dashboards
# ==============================================================================

from __future__ import annotations

from typing import Dict

from fastapi import APIRouter

from smartcow.api.dependencies import FacadeDep
from smartcow.core.constants import Topics
from smartcow.core.exceptions import NotFoundError
from smartcow.schemas.base import APIResponse

router = APIRouter(prefix="/events", tags=["Events"])


@router.get(
    "",
    response_model=APIResponse[Dict[str, int]],
    summary="All sequences",
    description="Last sequence number of every topic.",
)
async def all_sequences(facade: FacadeDep) -> APIResponse[Dict[str, int]]:
    sequences = {topic: facade.bus.current_sequence(topic) for topic in Topics.all_topics()}
    return APIResponse.ok(data=sequences)


@router.get(
    "/{topic}",
    response_model=APIResponse[dict],
    summary="Topic sequence",
    description="A sequence higher than the last one seen means: re-fetch.",
)
async def topic_sequence(topic: str, facade: FacadeDep) -> APIResponse[dict]:
    if topic not in Topics.all_topics():
        raise NotFoundError("Unknown topic", resource_type="topic", resource_id=topic)
    return APIResponse.ok(data={"topic": topic, "sequence": facade.bus.current_sequence(topic)})
