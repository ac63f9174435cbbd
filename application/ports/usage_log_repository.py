"""Port interface for tool usage analytics."""

from typing import Any, Dict, List, Protocol

from application.models import UsageLogEntry


class UsageLogRepository(Protocol):
    """Append-only log of tool interactions."""

    def log(self, entry: UsageLogEntry) -> None:
        ...

    def get_daily_usage(self, tool_slug: str, days: int = 30) -> List[Dict[str, Any]]:
        """Per-day event counts for a tool, oldest day first.

        Returns:
            List of {"date": "YYYY-MM-DD", "count": int}.
        """
        ...

    def get_popular_tools(self, days: int = 30, limit: int = 10) -> List[Dict[str, Any]]:
        """Tools with the most events, most used first.

        Returns:
            List of {"tool_slug": str, "usage_count": int}.
        """
        ...
