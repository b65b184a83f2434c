"""
Public liveness check.
"""

from __future__ import annotations

import logging

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_db
from app.core.config import settings
from app.schemas.common import HealthResponse

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


async def ping_redis() -> bool:
    client = aioredis.from_url(settings.REDIS_URL, socket_connect_timeout=1)
    try:
        await client.ping()
        return True
    except Exception as e:
        logger.error("Health check Redis failure: %s", e)
        return False
    finally:
        await client.aclose()


@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """DB and Redis connectivity. Redis is optional, so only the DB decides status."""
    db_ok = False
    try:
        await db.execute(select(1))
        db_ok = True
    except Exception as e:
        logger.error("Health check DB failure: %s", e)

    return HealthResponse(
        status="ok" if db_ok else "degraded",
        db=db_ok,
        redis=await ping_redis(),
        version=settings.VERSION,
    )
