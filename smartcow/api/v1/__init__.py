# ==============================================================================
# API V1 ENDPOINTS PACKAGE
# ==============================================================================

"""
API V1 Endpoints
================

Version 1 API endpoint implementations.
"""

from smartcow.api.v1.accounts import router as accounts_router
from smartcow.api.v1.articles import router as articles_router
from smartcow.api.v1.auth import router as auth_router
from smartcow.api.v1.community import router as community_router
from smartcow.api.v1.events import router as events_router
from smartcow.api.v1.marketplace import router as marketplace_router
from smartcow.api.v1.orders import router as orders_router
from smartcow.api.v1.robot import router as robot_router

__all__ = [
    "accounts_router",
    "articles_router",
    "auth_router",
    "community_router",
    "events_router",
    "marketplace_router",
    "orders_router",
    "robot_router",
]
