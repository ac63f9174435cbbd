"""Port interface for subscription tier lookup."""

from typing import Protocol

from application.models import Tier


class TierResolver(Protocol):
    """Resolves the subscription tier of an authenticated user."""

    def resolve_tier(self, user_id: str) -> Tier:
        ...
