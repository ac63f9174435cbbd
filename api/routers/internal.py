"""Internal maintenance endpoints.

Secured by X-Internal-Key header. Intended for a scheduler (cron job) that
sweeps expired usage counters.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_cleanup_rate_limits_use_case, verify_internal_key
from api.schemas.tools import CleanupResponse
from application.errors import StorageError
from application.use_cases.cleanup_rate_limits import CleanupRateLimitsUseCase
from backend.services.rate_windows import utc_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/internal", tags=["internal"])


@router.post("/rate-limits/cleanup", response_model=CleanupResponse)
def cleanup_rate_limits(
    _auth: None = Depends(verify_internal_key),
    use_case: CleanupRateLimitsUseCase = Depends(get_cleanup_rate_limits_use_case),
):
    """Delete usage counters whose window has closed."""
    now = utc_now()
    try:
        deleted = use_case.execute(now=now)
    except StorageError as e:
        logger.error("Rate limit cleanup failed: %s", e)
        raise HTTPException(status_code=503, detail="Rate limit storage unavailable")
    return CleanupResponse(deleted=deleted, ran_at=now)
