"""
GeoFeatures Backend — Request Logging Middleware
==================================================

What:  One access log line per API request.
How:   Times `call_next` and logs method, path (with the feature id when the
       route has one), status and duration. The request ID is added by
       RequestIDLogFilter, not by this middleware.

Example line:
    2024-01-15T12:00:00 [WARNING] geofeatures.access [a1b2c3d4]: PUT /api/features/abc 400 1.3ms from 127.0.0.1

Level by status: 5xx → ERROR, 4xx → WARNING, otherwise INFO.
Request bodies are never logged.
"""

import logging
import time
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger("geofeatures.access")

DEFAULT_SKIP_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Access logger.

    Args:
        skip_paths: exact paths that are never logged (default: /health,
                    which container probes hit every few seconds)
    """

    def __init__(self, app: ASGIApp, skip_paths: Optional[Iterable[str]] = None):
        super().__init__(app)
        self.skip_paths = frozenset(skip_paths) if skip_paths is not None else DEFAULT_SKIP_PATHS

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.skip_paths:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        feature_id = request.path_params.get("feature_id")
        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms from %s",
            request.method,
            path,
            response.status_code,
            duration_ms,
            client_ip,
            extra={
                "method": request.method,
                "path": path,
                "feature_id": feature_id,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
