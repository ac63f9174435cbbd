"""Request and response schemas for the tool endpoints."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from application.models import FieldSpec, ToolCategory, ToolDescriptor


class ToolFieldSchema(BaseModel):
    name: str
    label: str
    type: str
    required: bool
    min: Optional[float] = None
    max: Optional[float] = None
    options: Optional[Dict[str, str]] = None
    placeholder: Optional[str] = None
    help: Optional[str] = None

    @classmethod
    def from_spec(cls, spec: FieldSpec) -> "ToolFieldSchema":
        return cls(
            name=spec.name,
            label=spec.label,
            type=spec.type.value,
            required=spec.required,
            min=spec.min,
            max=spec.max,
            options=dict(spec.options) if spec.options else None,
            placeholder=spec.placeholder,
            help=spec.help,
        )


class ToolSummary(BaseModel):
    """Public metadata for a tool listing."""
    slug: str
    name: str
    description: str
    category: str
    tier: str
    type: str
    icon: str
    color: str

    @classmethod
    def from_descriptor(cls, tool: ToolDescriptor) -> "ToolSummary":
        return cls(**tool.metadata())


class ToolDetail(ToolSummary):
    """Tool metadata including its input form."""
    fields: List[ToolFieldSchema]

    @classmethod
    def from_descriptor(cls, tool: ToolDescriptor) -> "ToolDetail":
        return cls(
            **tool.metadata(),
            fields=[ToolFieldSchema.from_spec(spec) for spec in tool.fields],
        )


class CategorySchema(BaseModel):
    slug: str
    label: str
    icon: str
    color: str
    description: str
    tool_count: int = 0

    @classmethod
    def from_category(cls, category: ToolCategory, tool_count: int = 0) -> "CategorySchema":
        return cls(**vars(category), tool_count=tool_count)


class RegistryStatistics(BaseModel):
    total_tools: int
    by_category: Dict[str, int]
    by_tier: Dict[str, int]


class InvokeToolRequest(BaseModel):
    """Request body for a tool invocation."""
    inputs: Dict[str, Any] = Field(default_factory=dict)
    session_id: Optional[str] = None


class RemainingUsesResponse(BaseModel):
    tool_slug: str
    remaining: int
    unlimited: bool


class CalculationHistoryResponse(BaseModel):
    calculations: List[Dict[str, Any]]


class ToolStatsResponse(BaseModel):
    tool_slug: str
    total_uses: int
    unique_users: int
    avg_per_user: float
    today: int
    this_week: int
    this_month: int
    daily_usage: List[Dict[str, Any]]


class PopularTool(BaseModel):
    tool_slug: str
    usage_count: int


class PopularToolsResponse(BaseModel):
    days: int
    tools: List[PopularTool]


class CleanupResponse(BaseModel):
    deleted: int
    ran_at: datetime
