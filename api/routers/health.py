"""
Health check router.

This router provides health check endpoints for monitoring and load balancers.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.deps import get_settings, get_supabase_client
from backend.settings import Settings

logger = logging.getLogger(__name__)

SERVICE_NAME = "btd-tools-api"

router = APIRouter(
    tags=["Health"],
)


@router.get("/health")
def health():
    """
    Simple liveness endpoint.

    Returns:
        dict: Status indicator for health checks
    """
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/ready")
def health_ready(settings: Settings = Depends(get_settings)):
    """
    Readiness probe that checks downstream dependencies.

    Verifies Supabase connectivity when the counters or analytics live there.
    Returns 503 if any dependency is unavailable.
    """
    checks = {}

    try:
        client = get_supabase_client()
        if client is not None:
            # Lightweight query to verify connectivity
            client.table("tool_rate_limits").select("id").limit(1).execute()
            checks["supabase"] = "ok"
        else:
            checks["supabase"] = "not_configured"
    except Exception as e:
        logger.warning("Readiness check failed for supabase: %s", e)
        checks["supabase"] = "unavailable"
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "service": SERVICE_NAME,
                "checks": checks,
            },
        )

    checks["rate_limit_store"] = settings.rate_limit_store
    checks["ai_provider"] = settings.ai_provider
    return {"status": "ready", "service": SERVICE_NAME, "checks": checks}
