"""Internal tool analytics endpoints.

Secured by X-Internal-Key header. No user auth required.
"""

from fastapi import APIRouter, Depends, Query

from api.deps import (
    get_calculation_repository,
    get_usage_log_repository,
    require_tool,
    verify_internal_key,
)
from api.schemas.tools import PopularToolsResponse, ToolStatsResponse
from application.models import ToolDescriptor
from application.ports.calculation_repository import CalculationRepository
from application.ports.usage_log_repository import UsageLogRepository

router = APIRouter(
    prefix="/analytics",
    tags=["analytics"],
    dependencies=[Depends(verify_internal_key)],
)


@router.get("/tools/{slug}", response_model=ToolStatsResponse)
def tool_stats(
    days: int = Query(30, ge=1, le=365),
    tool: ToolDescriptor = Depends(require_tool),
    calculation_repo: CalculationRepository = Depends(get_calculation_repository),
    usage_log_repo: UsageLogRepository = Depends(get_usage_log_repository),
):
    """Usage statistics and daily usage for one tool."""
    stats = calculation_repo.get_tool_stats(tool.slug, days=days)
    return ToolStatsResponse(
        tool_slug=tool.slug,
        daily_usage=usage_log_repo.get_daily_usage(tool.slug, days=days),
        **stats,
    )


@router.get("/popular", response_model=PopularToolsResponse)
def popular_tools(
    days: int = Query(30, ge=1, le=365),
    limit: int = Query(10, ge=1, le=100),
    usage_log_repo: UsageLogRepository = Depends(get_usage_log_repository),
):
    return PopularToolsResponse(
        days=days,
        tools=usage_log_repo.get_popular_tools(days=days, limit=limit),
    )
