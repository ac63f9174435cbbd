"""Supabase implementation of UsageLogRepository."""

from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List

from supabase import Client

from application.models import UsageLogEntry
from backend.services.rate_windows import utc_now


class SupabaseUsageLogRepository:
    """Supabase-backed tool usage log.

    Daily and per-tool counts are aggregated in Postgres
    (see sql/tool_analytics.sql).
    """

    TABLE = "tool_usage_logs"
    DAILY_USAGE_RPC = "tool_daily_usage"
    POPULAR_TOOLS_RPC = "popular_tools"

    def __init__(self, client: Client, clock: Callable[[], datetime] = utc_now) -> None:
        self._client = client
        self._clock = clock

    def log(self, entry: UsageLogEntry) -> None:
        payload: Dict[str, Any] = {
            "tool_slug": entry.tool_slug,
            "action": entry.action,
            "user_id": entry.user_id,
            "metadata": entry.metadata,
            "ip_address": entry.ip_address,
            "user_agent": entry.user_agent,
            "session_id": entry.session_id,
        }
        if entry.created_at is not None:
            payload["created_at"] = entry.created_at.isoformat()
        self._client.table(self.TABLE).insert(payload).execute()

    def get_daily_usage(self, tool_slug: str, days: int = 30) -> List[Dict[str, Any]]:
        since = self._clock() - timedelta(days=days)
        result = self._client.rpc(
            self.DAILY_USAGE_RPC,
            {"p_tool_slug": tool_slug, "p_since": since.isoformat()},
        ).execute()
        return [
            {"date": str(row["usage_date"]), "count": int(row["usage_count"])}
            for row in result.data or []
        ]

    def get_popular_tools(self, days: int = 30, limit: int = 10) -> List[Dict[str, Any]]:
        since = self._clock() - timedelta(days=days)
        result = self._client.rpc(
            self.POPULAR_TOOLS_RPC,
            {"p_since": since.isoformat(), "p_limit": limit},
        ).execute()
        return [
            {"tool_slug": row["tool_slug"], "usage_count": int(row["usage_count"])}
            for row in result.data or []
        ]
