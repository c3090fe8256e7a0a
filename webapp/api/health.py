# webapp/api/health.py

import asyncio
import logging
import time
from datetime import datetime, timezone
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter()
logger = logging.getLogger(__name__)


async def _llm_status(request: Request) -> str:
    orchestrator = request.app.state.orchestrator
    if orchestrator is None:
        return "down"

    # Self-hosted providers can be pinged; hosted ones only need credentials
    is_available = getattr(orchestrator.rewrite_service, "is_available", None)
    if is_available is not None and not await is_available():
        return "down"
    return "up"


@router.get("/health")
async def health_check(request: Request) -> JSONResponse:
    """Health check endpoint"""
    state = request.app.state

    database_status = "down"
    try:
        if await asyncio.to_thread(state.db.ping):
            database_status = "up"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")

    llm_status = await _llm_status(request)
    cache_status = "up" if state.cache.is_sweeping else "down"

    healthy = database_status == "up" and llm_status == "up"
    body = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "database": database_status,
            "llm": llm_status,
            "cache": cache_status,
        },
        "uptime": int(time.monotonic() - state.started_at),
        "app": state.settings.app_name,
        "version": state.settings.version,
    }
    return JSONResponse(body, status_code=200 if healthy else 503)
