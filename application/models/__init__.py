"""Application domain models for the tool catalog."""

from .tools import (
    DEFAULT_QUOTA,
    UNLIMITED,
    AuthResult,
    CalculationRecord,
    ErrorCode,
    FieldSpec,
    FieldType,
    InvocationResult,
    Period,
    PromptBuilder,
    PureCompute,
    RateLimitPolicy,
    Requester,
    TemplateFill,
    Tier,
    ToolBehavior,
    ToolCategory,
    ToolDescriptor,
    UsageCounter,
    UsageLogEntry,
)

__all__ = [
    "DEFAULT_QUOTA",
    "UNLIMITED",
    "AuthResult",
    "CalculationRecord",
    "ErrorCode",
    "FieldSpec",
    "FieldType",
    "InvocationResult",
    "Period",
    "PromptBuilder",
    "PureCompute",
    "RateLimitPolicy",
    "Requester",
    "TemplateFill",
    "Tier",
    "ToolBehavior",
    "ToolCategory",
    "ToolDescriptor",
    "UsageCounter",
    "UsageLogEntry",
]
