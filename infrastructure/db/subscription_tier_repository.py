"""Supabase implementation of TierResolver.

Reads the user's active subscriptions and maps their billing product IDs to
tiers. The highest mapped tier wins; users without a mapped subscription are
on the free tier.
"""

import logging
from typing import Dict, Mapping

from supabase import Client

from application.models import Tier

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = ("active", "trialing")


class SupabaseTierResolver:
    """Tier lookup backed by the subscriptions table."""

    TABLE = "subscriptions"

    def __init__(self, client: Client, products: Mapping[str, Tier]) -> None:
        """Initialize the resolver.

        Args:
            client: Supabase client for database access.
            products: Billing product ID to the tier it grants.
        """
        self._client = client
        self._products = dict(products)
        self._cache: Dict[str, Tier] = {}

    def resolve_tier(self, user_id: str) -> Tier:
        """Highest tier granted by the user's active subscriptions.

        Lookup failures resolve to Tier.FREE so that a billing outage never
        grants paid access.
        """
        if user_id in self._cache:
            return self._cache[user_id]

        try:
            result = (
                self._client.table(self.TABLE)
                .select("product_id")
                .eq("user_id", user_id)
                .in_("status", list(ACTIVE_STATUSES))
                .execute()
            )
        except Exception as e:
            logger.warning("Failed to resolve tier for user %s: %s", user_id, e)
            return Tier.FREE

        tier = Tier.FREE
        for row in result.data or []:
            granted = self._products.get(str(row.get("product_id")))
            if granted is not None and granted.rank > tier.rank:
                tier = granted

        self._cache[user_id] = tier
        return tier
