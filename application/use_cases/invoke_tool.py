"""Use case: invoke a tool on behalf of a requester.

Orchestrates: access check -> input validation -> compute/generate ->
persistence -> response.

A quota unit is consumed by the access check, so a request that then fails
validation still counts against the requester's quota.
"""

import logging
from typing import Any, Dict, Optional

from application.models import (
    CalculationRecord,
    ErrorCode,
    InvocationResult,
    PromptBuilder,
    PureCompute,
    Requester,
    TemplateFill,
    ToolDescriptor,
    UsageLogEntry,
)
from application.ports.calculation_repository import CalculationRepository
from application.ports.usage_log_repository import UsageLogRepository
from backend.ai.router import ProviderRouter
from backend.services.access_policy import AccessPolicyEngine
from backend.services.input_validator import validate_inputs

logger = logging.getLogger(__name__)

DENIAL_MESSAGES = {
    ErrorCode.UPGRADE_REQUIRED: "Upgrade your plan to access this tool.",
    ErrorCode.RATE_LIMITED: "Usage limit reached for this period. Upgrade for more.",
    ErrorCode.STORAGE_ERROR: "Unable to verify usage right now. Please try again.",
}
COMPUTATION_FAILED_MESSAGE = "An error occurred while running this tool. Please try again."


class InvokeToolUseCase:
    """Runs one tool invocation end to end."""

    def __init__(
        self,
        access_policy: AccessPolicyEngine,
        calculation_repo: CalculationRepository,
        usage_log_repo: UsageLogRepository,
        provider_router: Optional[ProviderRouter] = None,
        analytics_enabled: bool = True,
    ) -> None:
        self._access_policy = access_policy
        self._calculation_repo = calculation_repo
        self._usage_log_repo = usage_log_repo
        self._provider_router = provider_router
        self._analytics_enabled = analytics_enabled

    def execute(
        self,
        tool: ToolDescriptor,
        requester: Requester,
        inputs: Dict[str, Any],
        user_agent: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> InvocationResult:
        """Invoke `tool` with `inputs`.

        Args:
            tool: Registered tool descriptor.
            requester: Caller identity used for gating and quota.
            inputs: Raw field values keyed by field name.
            user_agent: Optional client user agent, stored with the result.
            session_id: Optional client session, stored in the usage log.

        Returns:
            InvocationResult; never raises for denials or tool failures.
        """
        # 1. Access check
        auth = self._access_policy.authorize(tool, requester)
        if not auth.allowed:
            return InvocationResult(
                allowed=False,
                success=False,
                error=auth.reason,
                message=DENIAL_MESSAGES.get(auth.reason),
                remaining=auth.remaining,
                reset_at=auth.reset_at,
            )

        # 2. Input validation
        values, errors = validate_inputs(tool.fields, inputs)
        if errors:
            return InvocationResult(
                allowed=True,
                success=False,
                error=ErrorCode.VALIDATION_FAILED,
                errors=errors,
                remaining=auth.remaining,
            )

        # 3-4. Compute and store the result
        try:
            outputs = self._run(tool, values)
            stored = self._calculation_repo.create(
                CalculationRecord(
                    tool_slug=tool.slug,
                    input_data=values,
                    result_data=outputs if isinstance(outputs, dict) else {"content": outputs},
                    user_id=requester.user_id,
                    ip_address=requester.ip_address,
                    user_agent=user_agent,
                )
            )
        except Exception:
            logger.exception(
                "Tool %s failed for requester %s", tool.slug, requester.key
            )
            return InvocationResult(
                allowed=True,
                success=False,
                error=ErrorCode.COMPUTATION_FAILED,
                message=COMPUTATION_FAILED_MESSAGE,
                remaining=auth.remaining,
            )

        self._log_usage(tool, requester, user_agent, session_id)

        # 5. Response
        return InvocationResult(
            allowed=True,
            success=True,
            outputs=outputs,
            remaining=auth.remaining,
            reset_at=auth.reset_at,
            calculation_id=stored.get("id") if stored else None,
        )

    def _run(self, tool: ToolDescriptor, values: Dict[str, Any]) -> Any:
        behavior = tool.behavior
        if isinstance(behavior, PureCompute):
            return behavior.compute(values)
        if isinstance(behavior, TemplateFill):
            return behavior.render(values)
        if isinstance(behavior, PromptBuilder):
            if self._provider_router is None:
                raise RuntimeError(f"Tool {tool.slug} needs an AI provider but none is configured")
            prompt = behavior.build_prompt(values)
            content = self._provider_router.generate(prompt, behavior.system_prompt)
            return behavior.parse_response(content)
        raise TypeError(f"Unsupported tool behavior: {type(behavior).__name__}")

    def _log_usage(
        self,
        tool: ToolDescriptor,
        requester: Requester,
        user_agent: Optional[str],
        session_id: Optional[str],
    ) -> None:
        if not self._analytics_enabled:
            return
        try:
            self._usage_log_repo.log(
                UsageLogEntry(
                    tool_slug=tool.slug,
                    action=tool.action,
                    user_id=requester.user_id,
                    ip_address=requester.ip_address,
                    user_agent=user_agent,
                    session_id=session_id,
                )
            )
        except Exception as e:
            logger.warning("Failed to log usage for tool %s: %s", tool.slug, e)
