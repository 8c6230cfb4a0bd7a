# ==============================================================================
# API PACKAGE - HTTP Surface
# ==============================================================================

"""
API Package
===========

FastAPI routers and dependencies. Dashboards call and poll these
endpoints; every route delegates to the SyncFacade.
"""

from smartcow.api.router import api_router

__all__ = ["api_router"]
