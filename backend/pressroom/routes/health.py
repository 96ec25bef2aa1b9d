"""
Pressroom Backend — Health Check Route
========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings both databases (SELECT 1) and asks the image storage backend
       whether it is reachable.

Status levels:
    - healthy:   every dependency operational (HTTP 200)
    - degraded:  image storage down; reads still work (HTTP 200)
    - unhealthy: a database is down (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request, Response

from pressroom import __version__
from pressroom.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


async def _ping(request: Request, name: str) -> str:
    database = getattr(request.app.state, name, None)
    if database is not None and await database.ping():
        return "connected"
    return "disconnected"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    articles_status = await _ping(request, "articles_db")
    admins_status = await _ping(request, "admins_db")

    storage_status = "available"
    try:
        if not await request.app.state.upload_adapter.storage.health_check():
            storage_status = "unavailable"
    except Exception as e:
        storage_status = "unavailable"
        logger.warning("Health check: image storage unreachable: %s", str(e))

    if "disconnected" in (articles_status, admins_status):
        overall = "unhealthy"
        response.status_code = 503
    elif storage_status != "available":
        overall = "degraded"
    else:
        overall = "healthy"

    return HealthResponse(
        status=overall,
        version=__version__,
        articles_database=articles_status,
        admins_database=admins_status,
        image_storage=storage_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
