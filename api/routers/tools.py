"""Tool catalog and invocation endpoints.

Tools are open to anonymous visitors; a bearer token upgrades the requester
from IP-based counting to their account and subscription tier.
"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from api.deps import (
    get_access_policy_engine,
    get_calculation_repository,
    get_current_user,
    get_invoke_tool_use_case,
    get_requester,
    get_tool_registry,
    require_tool,
)
from api.schemas.tools import (
    CalculationHistoryResponse,
    CategorySchema,
    InvokeToolRequest,
    RegistryStatistics,
    RemainingUsesResponse,
    ToolDetail,
    ToolSummary,
)
from application.errors import StorageError
from application.models import UNLIMITED, ErrorCode, Requester, Tier, ToolDescriptor
from application.ports.calculation_repository import CalculationRepository
from application.use_cases.invoke_tool import InvokeToolUseCase
from backend.services.access_policy import AccessPolicyEngine
from backend.services.tool_registry import ToolRegistry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tools"])

ERROR_STATUS_CODES = {
    ErrorCode.UPGRADE_REQUIRED: 403,
    ErrorCode.RATE_LIMITED: 429,
    ErrorCode.VALIDATION_FAILED: 422,
    ErrorCode.STORAGE_ERROR: 503,
    ErrorCode.COMPUTATION_FAILED: 500,
}


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@router.get("/tools", response_model=list[ToolSummary])
def list_tools(
    category: Optional[str] = None,
    tier: Optional[Tier] = None,
    order_by: str = "name",
    order: Literal["asc", "desc"] = "asc",
    registry: ToolRegistry = Depends(get_tool_registry),
):
    """List registered tools, optionally filtered by category or tier."""
    try:
        tools = registry.list(
            category=category, tier=tier, order_by=order_by, descending=order == "desc"
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [ToolSummary.from_descriptor(tool) for tool in tools]


@router.get("/tools/categories", response_model=list[CategorySchema])
def list_categories(registry: ToolRegistry = Depends(get_tool_registry)):
    return [
        CategorySchema.from_category(category, registry.count(category=category.slug))
        for category in registry.categories()
    ]


@router.get("/tools/statistics", response_model=RegistryStatistics)
def registry_statistics(registry: ToolRegistry = Depends(get_tool_registry)):
    return registry.statistics()


@router.get("/tools/{slug}", response_model=ToolDetail)
def get_tool(tool: ToolDescriptor = Depends(require_tool)):
    return ToolDetail.from_descriptor(tool)


# ---------------------------------------------------------------------------
# Usage
# ---------------------------------------------------------------------------


@router.get("/tools/{slug}/remaining", response_model=RemainingUsesResponse)
def remaining_uses(
    tool: ToolDescriptor = Depends(require_tool),
    requester: Requester = Depends(get_requester),
    access_policy: AccessPolicyEngine = Depends(get_access_policy_engine),
):
    """Uses left for the caller in the current window. Does not consume quota."""
    try:
        remaining = access_policy.remaining_uses(tool, requester)
    except StorageError as e:
        logger.error("Failed to read remaining uses for %s: %s", tool.slug, e)
        raise HTTPException(status_code=503, detail="Usage data temporarily unavailable")
    return RemainingUsesResponse(
        tool_slug=tool.slug, remaining=remaining, unlimited=remaining == UNLIMITED
    )


@router.post("/tools/{slug}/invoke")
def invoke_tool(
    body: InvokeToolRequest,
    request: Request,
    tool: ToolDescriptor = Depends(require_tool),
    requester: Requester = Depends(get_requester),
    use_case: InvokeToolUseCase = Depends(get_invoke_tool_use_case),
):
    """Run a tool.

    The body is always the invocation result. Denials and failures carry a
    machine-readable `error` code and the matching HTTP status.
    """
    result = use_case.execute(
        tool,
        requester,
        body.inputs,
        user_agent=request.headers.get("user-agent"),
        session_id=body.session_id,
    )
    status_code = ERROR_STATUS_CODES.get(result.error, 200) if result.error else 200
    return JSONResponse(status_code=status_code, content=result.to_dict())


@router.get("/me/calculations", response_model=CalculationHistoryResponse)
def my_calculations(
    limit: int = Query(20, ge=1, le=100),
    user_id: str = Depends(get_current_user),
    calculation_repo: CalculationRepository = Depends(get_calculation_repository),
):
    """The caller's most recent tool results."""
    return CalculationHistoryResponse(
        calculations=calculation_repo.list_for_user(user_id, limit=limit)
    )
