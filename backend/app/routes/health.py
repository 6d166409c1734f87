"""
GeoFeatures Backend — Health Check Route
==========================================

What:  Health check endpoint for monitoring and container probes.
How:   Pings the database handle and reports the aggregate status.

Status levels:
    - healthy:   database answers a ping
    - degraded:  running without a database (reads return [], writes 500)

The endpoint always answers 200 so that a degraded instance keeps serving.
"""

import logging
import time

from fastapi import APIRouter, Depends

from app import __version__
from app.database import Database, get_database
from app.schemas.feature import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Module load time, used for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(database: Database = Depends(get_database)) -> HealthResponse:
    if await database.ping():
        db_status, overall = "connected", "healthy"
    else:
        db_status, overall = "disconnected", "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
