from __future__ import annotations

from datetime import UTC, datetime

import structlog
from fastapi import APIRouter
from sqlalchemy import text

from alliswell.api.deps import get_redis_client
from alliswell.core.config import get_settings
from alliswell.infrastructure.db.session import get_session_factory

router = APIRouter(tags=["Observability"])
logger = structlog.get_logger()


async def check_database() -> dict:
    """Check the user/session database connection."""
    try:
        session_factory = get_session_factory()
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
            return {"status": "ok"}
    except Exception as e:
        return {"status": "error", "message": str(e)[:100]}


async def check_redis() -> dict:
    """Check Redis when it backs the session store."""
    if get_settings().session_backend != "redis":
        return {"status": "skipped"}
    try:
        await get_redis_client().ping()
        return {"status": "ok"}
    except Exception as e:
        return {"status": "error", "message": str(e)[:100]}


@router.get("/health", summary="Service health check")
async def health_check() -> dict:
    """Return basic service and datastore status information."""
    settings = get_settings()

    database_status = await check_database()
    redis_status = await check_redis()

    overall_status = "ok"
    if database_status["status"] != "ok" or redis_status["status"] == "error":
        overall_status = "degraded"

    payload = {
        "service": settings.app_name,
        "version": settings.version,
        "status": overall_status,
        "timestamp": datetime.now(UTC).isoformat(),
        "datastores": {
            "database": database_status,
            "redis": redis_status,
        },
    }
    logger.info("health_check", **payload)
    return payload
