"""Access policy for tool invocations: tier gating plus usage quotas.

Authorize runs before any validation, computation or AI call:
    1. Tier check: the requester's tier must satisfy the tool's required tier.
       Denials here never touch the counter store.
    2. Quota check: one atomic increment-if-below on the requester's counter
       for the current window. Unlimited quotas skip the store entirely.

Storage failures deny the request (fail closed).
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from application.errors import StorageError
from application.models import (
    UNLIMITED,
    AuthResult,
    ErrorCode,
    Period,
    RateLimitPolicy,
    Requester,
    Tier,
    ToolDescriptor,
)
from application.ports.rate_counter_store import RateCounterStore
from application.ports.tier_resolver import TierResolver
from backend.services.rate_windows import reset_time, utc_now

logger = logging.getLogger(__name__)


class AccessPolicyEngine:
    """Decides whether a requester may invoke a tool right now."""

    def __init__(
        self,
        store: RateCounterStore,
        tier_resolver: TierResolver,
        policy: Optional[RateLimitPolicy] = None,
        period: Period = Period.DAY,
        rate_limiting_enabled: bool = True,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._tier_resolver = tier_resolver
        self._policy = policy or RateLimitPolicy.default()
        self._period = period
        self._rate_limiting_enabled = rate_limiting_enabled
        self._clock = clock

    def resolve_tier(self, requester: Requester) -> Tier:
        """Anonymous requesters are always on the free tier."""
        if not requester.is_authenticated:
            return Tier.FREE
        return self._tier_resolver.resolve_tier(requester.user_id)

    def quota_for(self, tool: ToolDescriptor, tier: Tier) -> int:
        policy = tool.rate_limits or self._policy
        return policy.quota_for(tier, self._period)

    def authorize(self, tool: ToolDescriptor, requester: Requester) -> AuthResult:
        """Check tier and consume one unit of quota.

        Returns:
            AuthResult with allowed=True and the remaining uses, or a denial
            carrying UPGRADE_REQUIRED, RATE_LIMITED or STORAGE_ERROR.
        """
        tier = self.resolve_tier(requester)
        if not tier.satisfies(tool.required_tier):
            logger.info(
                "Tool %s requires tier %s, requester %s is on %s",
                tool.slug,
                tool.required_tier.value,
                requester.key,
                tier.value,
            )
            return AuthResult(allowed=False, reason=ErrorCode.UPGRADE_REQUIRED)

        quota = self.quota_for(tool, tier)
        if not self._rate_limiting_enabled or quota == UNLIMITED:
            return AuthResult(allowed=True, remaining=UNLIMITED)

        now = self._clock()
        window_reset = reset_time(self._period, now)
        try:
            count, allowed = self._store.increment_if_below(
                tool.slug,
                requester.key,
                self._period,
                ceiling=quota,
                reset_at=window_reset,
                now=now,
            )
        except StorageError as e:
            logger.error(
                "Rate counter unavailable for tool=%s requester=%s: %s",
                tool.slug,
                requester.key,
                e,
            )
            return AuthResult(allowed=False, reason=ErrorCode.STORAGE_ERROR)

        if not allowed:
            logger.info(
                "Rate limit reached for tool=%s requester=%s (%d/%d per %s)",
                tool.slug,
                requester.key,
                count,
                quota,
                self._period.value,
            )
            return AuthResult(
                allowed=False,
                reason=ErrorCode.RATE_LIMITED,
                remaining=0,
                reset_at=window_reset,
            )

        return AuthResult(
            allowed=True,
            remaining=max(0, quota - count),
            reset_at=window_reset,
        )

    def remaining_uses(self, tool: ToolDescriptor, requester: Requester) -> int:
        """Uses left in the current window without consuming any.

        Returns:
            -1 for unlimited, otherwise the remaining count (never negative).

        Raises:
            StorageError: If the counter cannot be read.
        """
        tier = self.resolve_tier(requester)
        quota = self.quota_for(tool, tier)
        if not self._rate_limiting_enabled or quota == UNLIMITED:
            return UNLIMITED

        counter = self._store.get(tool.slug, requester.key, self._period)
        if counter is None:
            return quota
        return max(0, quota - counter.effective_count(self._clock()))
