"""
Journal API: Health Check Route
===============================

What:  Liveness/readiness probe for load balancers and docker healthchecks.
How:   Runs SELECT 1 through the pool. 200 when the database answers,
       503 when it does not; the body has the same shape either way.
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from journal_api import __version__
from journal_api.database import Database
from journal_api.dependencies import get_database
from journal_api.schemas.errors import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(database: Database = Depends(get_database)):
    healthy = await database.health_check()
    body = HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=__version__,
        database="connected" if healthy else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if not healthy:
        logger.warning("Health check: database unreachable")
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
