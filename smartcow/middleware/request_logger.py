# ==============================================================================
# REQUEST LOGGER MIDDLEWARE
# ==============================================================================
# Request/response logging tagged with the active storage mode
# ==============================================================================

from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from smartcow.database.factory import StoreFactory

logger = logging.getLogger(__name__)


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """
    Logs every request with its status and timing.

    Adds ``X-Request-ID``, ``X-Response-Time`` and ``X-Storage-Mode``
    (``local`` or ``remote:<backend>``) so a dashboard can tell whether
    it was served from the remote store or the local fallback.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        request_id = uuid.uuid4().hex[:8]
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} "
                f"- Error ({duration_ms:.2f}ms): {e}"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        log_level = logging.INFO if response.status_code < 400 else logging.WARNING
        logger.log(
            log_level,
            f"[{request_id}] {request.method} {request.url.path} "
            f"- {response.status_code} ({duration_ms:.2f}ms)"
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        if StoreFactory.is_initialized():
            response.headers["X-Storage-Mode"] = StoreFactory.get_facade().mode
        return response
