"""Supabase implementation of RateCounterStore.

Uses one row per (tool_slug, requester_key, period) in tool_rate_limits.
The quota check runs inside the increment_tool_rate_limit RPC so that the
read, compare and increment happen in a single row-locked statement (see
sql/tool_rate_limits.sql).
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from supabase import Client

from application.errors import StorageError
from application.models import Period, UsageCounter

logger = logging.getLogger(__name__)


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


class SupabaseRateCounterRepository:
    """Supabase-backed usage counters."""

    TABLE = "tool_rate_limits"
    INCREMENT_RPC = "increment_tool_rate_limit"

    def __init__(self, client: Client) -> None:
        self._client = client

    def _to_counter(self, row: Dict[str, Any]) -> UsageCounter:
        return UsageCounter(
            tool_slug=row["tool_slug"],
            requester_key=row["requester_key"],
            period=Period(row["period"]),
            count=int(row["count"]),
            reset_at=_parse_timestamp(row["reset_at"]),
        )

    def _select(self, tool_slug: str, requester_key: str, period: Period) -> Optional[Dict[str, Any]]:
        result = (
            self._client.table(self.TABLE)
            .select("*")
            .eq("tool_slug", tool_slug)
            .eq("requester_key", requester_key)
            .eq("period", period.value)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None

    def get(
        self, tool_slug: str, requester_key: str, period: Period
    ) -> Optional[UsageCounter]:
        try:
            row = self._select(tool_slug, requester_key, period)
        except Exception as e:
            raise StorageError(f"Failed to read rate counter: {e}") from e
        return self._to_counter(row) if row else None

    def get_or_create(
        self,
        tool_slug: str,
        requester_key: str,
        period: Period,
        reset_at: datetime,
        now: datetime,
    ) -> UsageCounter:
        try:
            row = self._select(tool_slug, requester_key, period)
            if row and _parse_timestamp(row["reset_at"]) > now:
                return self._to_counter(row)

            result = (
                self._client.table(self.TABLE)
                .upsert(
                    {
                        "tool_slug": tool_slug,
                        "requester_key": requester_key,
                        "period": period.value,
                        "count": 0,
                        "reset_at": reset_at.isoformat(),
                    },
                    on_conflict="tool_slug,requester_key,period",
                )
                .execute()
            )
        except Exception as e:
            raise StorageError(f"Failed to create rate counter: {e}") from e

        if not result.data:
            raise StorageError("Rate counter upsert returned no row")
        return self._to_counter(result.data[0])

    def increment_if_below(
        self,
        tool_slug: str,
        requester_key: str,
        period: Period,
        ceiling: int,
        reset_at: datetime,
        now: datetime,
    ) -> Tuple[int, bool]:
        """Atomically increment the counter when it is below ceiling.

        Unlike the display-only reads, an empty RPC response is treated as a
        storage failure so the caller denies the request.
        """
        try:
            result = self._client.rpc(
                self.INCREMENT_RPC,
                {
                    "p_tool_slug": tool_slug,
                    "p_requester_key": requester_key,
                    "p_period": period.value,
                    "p_ceiling": ceiling,
                    "p_reset_at": reset_at.isoformat(),
                    "p_now": now.isoformat(),
                },
            ).execute()
        except Exception as e:
            raise StorageError(f"Rate counter increment failed: {e}") from e

        if not result.data:
            raise StorageError(f"{self.INCREMENT_RPC} returned no data")

        row = result.data[0]
        return int(row["new_count"]), bool(row["allowed"])

    def cleanup(self, now: datetime) -> int:
        try:
            result = (
                self._client.table(self.TABLE)
                .delete()
                .lt("reset_at", now.isoformat())
                .execute()
            )
        except Exception as e:
            raise StorageError(f"Rate counter cleanup failed: {e}") from e
        return len(result.data or [])
