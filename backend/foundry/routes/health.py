"""
Foundry — Health Check Route
=============================

What:  GET /health for Docker health checks and load balancer probes.
How:   Runs `SELECT 1` against the database and PINGs Redis.

Status levels:
    - healthy:   database and Redis reachable                 (HTTP 200)
    - degraded:  Redis down; the API works but jobs are lost  (HTTP 200)
    - unhealthy: database down                                (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Response
from redis.asyncio import Redis
from sqlalchemy import text

from foundry import __version__
from foundry.config import settings
from foundry.database import engine
from foundry.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


async def check_database() -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Health check: database unreachable: %s", str(e))
        return False
    return True


async def check_cache() -> bool:
    client = Redis.from_url(settings.redis_url, socket_connect_timeout=2)
    try:
        await client.ping()
    except Exception as e:
        logger.warning("Health check: redis unreachable: %s", str(e))
        return False
    finally:
        await client.aclose()
    return True


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    db_ok = await check_database()
    cache_ok = await check_cache()

    if not db_ok:
        overall = "unhealthy"
        response.status_code = 503
    elif not cache_ok:
        overall = "degraded"
    else:
        overall = "healthy"

    return HealthResponse(
        status=overall,
        version=__version__,
        database="connected" if db_ok else "disconnected",
        cache="connected" if cache_ok else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
