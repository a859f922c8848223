"""Health and readiness check routes."""

import logging

from fastapi import APIRouter, Depends

from config import settings
from dependencies import get_durable_cache
from services.durable_cache import DurableCache

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ready")
async def ready() -> dict:
    """Lightweight readiness check — no external calls."""
    return {"status": "ok", "service": "parliament-watch-api", "commit": settings.git_sha}


@router.get("/health")
async def health(durable_cache: DurableCache = Depends(get_durable_cache)) -> dict:
    """Deep health check that verifies the durable cache is reachable."""
    result = {"status": "ok", "service": "parliament-watch-api", "commit": settings.git_sha, "cache": "not_tested"}

    try:
        await durable_cache.ping()
        result["cache"] = "connected"
    except Exception as e:
        logger.exception("Durable cache health check failed")
        result["status"] = "degraded"
        result["cache"] = "error"
        result["cache_error"] = str(e)

    return result
