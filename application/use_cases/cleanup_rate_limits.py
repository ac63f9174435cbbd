"""Use case: delete expired usage counters."""

import logging
from datetime import datetime
from typing import Optional

from application.ports.rate_counter_store import RateCounterStore
from backend.services.rate_windows import utc_now

logger = logging.getLogger(__name__)


class CleanupRateLimitsUseCase:
    """Periodic sweep of counters whose window has closed."""

    def __init__(self, store: RateCounterStore) -> None:
        self._store = store

    def execute(self, now: Optional[datetime] = None) -> int:
        """Delete counters with reset_at before `now` (default: current time).

        Returns:
            Number of deleted counters.
        """
        now = now or utc_now()
        deleted = self._store.cleanup(now)
        logger.info("Removed %d expired rate limit counters", deleted)
        return deleted
