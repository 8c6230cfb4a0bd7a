# ==============================================================================
# MAIN API ROUTER - Route Aggregation
# ==============================================================================
# Combines all API version routers
# ==============================================================================

from __future__ import annotations

from fastapi import APIRouter

from smartcow.api.v1 import (
    accounts_router,
    articles_router,
    auth_router,
    community_router,
    events_router,
    marketplace_router,
    orders_router,
    robot_router,
)
from smartcow.core.settings import settings

# Create main API router
api_router = APIRouter()

# Include v1 routers with API prefix
api_router.include_router(auth_router, prefix=settings.API_V1_PREFIX)
api_router.include_router(marketplace_router, prefix=settings.API_V1_PREFIX)
api_router.include_router(orders_router, prefix=settings.API_V1_PREFIX)
api_router.include_router(articles_router, prefix=settings.API_V1_PREFIX)
api_router.include_router(community_router, prefix=settings.API_V1_PREFIX)
api_router.include_router(accounts_router, prefix=settings.API_V1_PREFIX)
api_router.include_router(robot_router, prefix=settings.API_V1_PREFIX)
api_router.include_router(events_router, prefix=settings.API_V1_PREFIX)
