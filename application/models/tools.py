"""Domain models for the tool catalog, access policy and invocation results.

Tools are described by an immutable ToolDescriptor carrying a tagged
behaviour (PureCompute, PromptBuilder or TemplateFill). Access is decided
from a requester's Tier and per-period usage quotas in a RateLimitPolicy.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

# Quota value meaning "no limit".
UNLIMITED = -1

# Quota used when a tier/period pair is missing from a policy.
DEFAULT_QUOTA = 10


class Tier(str, Enum):
    """Subscription tier, ordered by entitlement."""

    FREE = "free"
    STARTER = "starter"
    PRO = "pro"
    BUSINESS = "business"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)

    def satisfies(self, required: "Tier") -> bool:
        """True if this tier grants access to tools requiring `required`."""
        return required is Tier.FREE or self.rank >= required.rank


_TIER_ORDER = [Tier.FREE, Tier.STARTER, Tier.PRO, Tier.BUSINESS]


class Period(str, Enum):
    """Rate limit window."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class ErrorCode(str, Enum):
    """Machine-readable reason attached to every denial or failure."""

    UPGRADE_REQUIRED = "upgrade_required"
    RATE_LIMITED = "rate_limit"
    VALIDATION_FAILED = "validation"
    COMPUTATION_FAILED = "computation_failed"
    STORAGE_ERROR = "storage_error"


class FieldType(str, Enum):
    NUMBER = "number"
    INTEGER = "integer"
    EMAIL = "email"
    TEXT = "text"
    SELECT = "select"


# ---------------------------------------------------------------------------
# Rate limiting
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RateLimitPolicy:
    """Quotas per tier and period. A quota of -1 means unlimited."""

    quotas: Mapping[Tier, Mapping[Period, int]]

    def __post_init__(self) -> None:
        for tier in Tier:
            periods = self.quotas.get(tier)
            if not periods or Period.DAY not in periods:
                raise ValueError(f"Rate limit policy has no daily quota for tier '{tier.value}'")

    def quota_for(self, tier: Tier, period: Period = Period.DAY) -> int:
        return self.quotas.get(tier, {}).get(period, DEFAULT_QUOTA)

    @classmethod
    def default(cls) -> "RateLimitPolicy":
        return cls.daily(free=10, starter=100, pro=UNLIMITED, business=UNLIMITED)

    @classmethod
    def daily(cls, free: int, starter: int, pro: int, business: int) -> "RateLimitPolicy":
        """Build a policy that only sets daily quotas."""
        return cls(
            quotas={
                Tier.FREE: {Period.DAY: free},
                Tier.STARTER: {Period.DAY: starter},
                Tier.PRO: {Period.DAY: pro},
                Tier.BUSINESS: {Period.DAY: business},
            }
        )


@dataclass(frozen=True)
class Requester:
    """Who is invoking a tool.

    The authenticated user ID is the counting key when present, otherwise the
    network address is.
    """

    user_id: Optional[str] = None
    ip_address: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.user_id and not self.ip_address:
            raise ValueError("Requester needs a user ID or an IP address")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    @property
    def key(self) -> str:
        if self.user_id:
            return f"user:{self.user_id}"
        return f"ip:{self.ip_address}"


@dataclass
class UsageCounter:
    """Usage count for one (tool, requester, period) window."""

    tool_slug: str
    requester_key: str
    period: Period
    count: int
    reset_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.reset_at

    def effective_count(self, now: datetime) -> int:
        """Count as seen at `now`; an expired window counts as zero."""
        return 0 if self.is_expired(now) else self.count


# ---------------------------------------------------------------------------
# Tool descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldSpec:
    """Declared input field of a tool."""

    name: str
    label: str
    type: FieldType = FieldType.NUMBER
    required: bool = True
    min: Optional[float] = None
    max: Optional[float] = None
    options: Optional[Mapping[str, str]] = None
    placeholder: Optional[str] = None
    help: Optional[str] = None


@dataclass(frozen=True)
class PureCompute:
    """Calculator behaviour: a pure function from inputs to outputs."""

    compute: Callable[[Dict[str, Any]], Dict[str, Any]]

    action = "calculate"


def _identity(content: str) -> Any:
    return content


@dataclass(frozen=True)
class PromptBuilder:
    """AI behaviour: build a prompt, generate text, parse the reply."""

    build_prompt: Callable[[Dict[str, Any]], str]
    system_prompt: Optional[str] = None
    parse_response: Callable[[str], Any] = _identity

    action = "generate"


@dataclass(frozen=True)
class TemplateFill:
    """Generator behaviour: replace {{placeholders}} in a template.

    A placeholder maps either to an input field name or to a callable that
    receives all inputs.
    """

    template: str
    placeholders: Mapping[str, Union[str, Callable[[Dict[str, Any]], Any]]] = field(
        default_factory=dict
    )

    action = "generate"

    def render(self, inputs: Dict[str, Any]) -> str:
        content = self.template
        for placeholder, source in self.placeholders.items():
            if callable(source):
                value = source(inputs)
            else:
                value = inputs.get(source, "")
            content = content.replace("{{" + placeholder + "}}", "" if value is None else str(value))
        return content


ToolBehavior = Union[PureCompute, PromptBuilder, TemplateFill]


@dataclass(frozen=True)
class ToolDescriptor:
    """Immutable metadata and behaviour for one registered tool."""

    slug: str
    name: str
    category: str
    behavior: ToolBehavior
    required_tier: Tier = Tier.FREE
    description: str = ""
    fields: Tuple[FieldSpec, ...] = ()
    icon: str = "dashicons-calculator"
    color: str = "#2563eb"
    rate_limits: Optional[RateLimitPolicy] = None

    @property
    def kind(self) -> str:
        if isinstance(self.behavior, PureCompute):
            return "calculator"
        if isinstance(self.behavior, PromptBuilder):
            return "ai"
        return "generator"

    @property
    def action(self) -> str:
        return self.behavior.action

    def metadata(self) -> Dict[str, Any]:
        return {
            "slug": self.slug,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "tier": self.required_tier.value,
            "type": self.kind,
            "icon": self.icon,
            "color": self.color,
        }


@dataclass
class ToolCategory:
    slug: str
    label: str
    icon: str = "dashicons-admin-generic"
    color: str = "#6b7280"
    description: str = ""


# ---------------------------------------------------------------------------
# Results and records
# ---------------------------------------------------------------------------


@dataclass
class AuthResult:
    """Outcome of an access check."""

    allowed: bool
    reason: Optional[ErrorCode] = None
    remaining: Optional[int] = None
    reset_at: Optional[datetime] = None


@dataclass
class InvocationResult:
    """Outcome of a tool invocation, shaped for API responses."""

    allowed: bool
    success: bool
    outputs: Optional[Any] = None
    error: Optional[ErrorCode] = None
    message: Optional[str] = None
    errors: Dict[str, str] = field(default_factory=dict)
    remaining: Optional[int] = None
    reset_at: Optional[datetime] = None
    calculation_id: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "allowed": self.allowed,
            "success": self.success,
        }
        if self.outputs is not None:
            data["outputs"] = self.outputs
        if self.error is not None:
            data["error"] = self.error.value
        if self.message:
            data["message"] = self.message
        if self.errors:
            data["errors"] = self.errors
        if self.remaining is not None:
            data["remaining"] = self.remaining
        if self.reset_at is not None:
            data["reset_at"] = self.reset_at.isoformat()
        if self.calculation_id is not None:
            data["calculation_id"] = self.calculation_id
        return data


@dataclass
class CalculationRecord:
    """A stored tool result."""

    tool_slug: str
    input_data: Dict[str, Any]
    result_data: Dict[str, Any]
    user_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class UsageLogEntry:
    """An analytics event for a tool interaction."""

    tool_slug: str
    action: str
    user_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    session_id: Optional[str] = None
    created_at: Optional[datetime] = None
