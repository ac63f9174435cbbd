"""Supabase implementation of CalculationRepository."""

from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List

from supabase import Client

from application.models import CalculationRecord
from backend.services.rate_windows import utc_now


class SupabaseCalculationRepository:
    """Supabase-backed store of tool results."""

    TABLE = "tool_calculations"
    STATS_RPC = "tool_calculation_stats"

    def __init__(self, client: Client, clock: Callable[[], datetime] = utc_now) -> None:
        self._client = client
        self._clock = clock

    def create(self, record: CalculationRecord) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "tool_slug": record.tool_slug,
            "input_data": record.input_data,
            "result_data": record.result_data,
            "user_id": record.user_id,
            "ip_address": record.ip_address,
            "user_agent": record.user_agent,
        }
        if record.created_at is not None:
            payload["created_at"] = record.created_at.isoformat()

        result = self._client.table(self.TABLE).insert(payload).execute()
        return result.data[0]

    def list_for_user(self, user_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        result = (
            self._client.table(self.TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return result.data or []

    def get_tool_stats(self, tool_slug: str, days: int = 30) -> Dict[str, Any]:
        """Usage statistics for a tool.

        total_uses, unique_users and avg_per_user cover the last `days` days.
        today, this_week (Monday to Sunday) and this_month are calendar
        windows in UTC, independent of `days`.
        """
        now = self._clock()
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        start_of_week = start_of_day - timedelta(days=start_of_day.weekday())
        start_of_month = start_of_day.replace(day=1)
        since = now - timedelta(days=days)

        result = self._client.rpc(
            self.STATS_RPC,
            {
                "p_tool_slug": tool_slug,
                "p_since": since.isoformat(),
                "p_start_of_day": start_of_day.isoformat(),
                "p_start_of_week": start_of_week.isoformat(),
                "p_start_of_month": start_of_month.isoformat(),
            },
        ).execute()
        row = (result.data or [{}])[0]

        total_uses = int(row.get("total_uses") or 0)
        unique_users = int(row.get("unique_users") or 0)
        return {
            "total_uses": total_uses,
            "unique_users": unique_users,
            "avg_per_user": round(total_uses / max(unique_users, 1), 1),
            "today": int(row.get("today") or 0),
            "this_week": int(row.get("this_week") or 0),
            "this_month": int(row.get("this_month") or 0),
        }
