"""Port interface for stored tool results."""

from typing import Any, Dict, List, Protocol

from application.models import CalculationRecord


class CalculationRepository(Protocol):
    """Repository protocol for calculation/generation history."""

    def create(self, record: CalculationRecord) -> Dict[str, Any]:
        """Persist a result.

        Returns:
            The stored row, including its generated "id".
        """
        ...

    def list_for_user(self, user_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        """Most recent results for a user, newest first."""
        ...

    def get_tool_stats(self, tool_slug: str, days: int = 30) -> Dict[str, Any]:
        """Usage statistics for a tool.

        Returns:
            Dict with total_uses, unique_users, avg_per_user, today,
            this_week and this_month.
        """
        ...
