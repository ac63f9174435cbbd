"""Port interface for per-tool usage counters."""

from datetime import datetime
from typing import Optional, Protocol, Tuple

from application.models import Period, UsageCounter


class RateCounterStore(Protocol):
    """Repository protocol for tool usage counters.

    Counters are keyed by (tool_slug, requester_key, period). A counter whose
    reset_at has passed is expired and counts as zero. Implementations raise
    application.errors.StorageError on any persistence failure.
    """

    def get(
        self, tool_slug: str, requester_key: str, period: Period
    ) -> Optional[UsageCounter]:
        """Read the stored counter without modifying it.

        Returns:
            The counter, expired or not, or None if no row exists.
        """
        ...

    def get_or_create(
        self,
        tool_slug: str,
        requester_key: str,
        period: Period,
        reset_at: datetime,
        now: datetime,
    ) -> UsageCounter:
        """Return the live counter, creating or resetting it if needed.

        A missing or expired row is replaced with count=0 and the given reset_at.
        """
        ...

    def increment_if_below(
        self,
        tool_slug: str,
        requester_key: str,
        period: Period,
        ceiling: int,
        reset_at: datetime,
        now: datetime,
    ) -> Tuple[int, bool]:
        """Atomically add one use if the live count is below ceiling.

        An expired or missing row is treated as count=0 with the given
        reset_at before comparing.

        Returns:
            Tuple of (count after the call, allowed). When not allowed the
            count is left unchanged.
        """
        ...

    def cleanup(self, now: datetime) -> int:
        """Delete counters whose reset_at is before now.

        Returns:
            Number of deleted counters.
        """
        ...
