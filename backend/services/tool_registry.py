"""Registry of tool descriptors and categories.

One registry instance is built at startup and handed to whatever needs tool
lookup (see api.deps.get_tool_registry).
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from application.errors import DuplicateToolError, ToolNotFoundError
from application.models import Tier, ToolCategory, ToolDescriptor

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ToolCategory(
        slug="financial",
        label="Financial Tools",
        icon="dashicons-chart-line",
        color="#10b981",
        description="Calculate ROI, profit margins, and financial metrics",
    ),
    ToolCategory(
        slug="marketing",
        label="Marketing Tools",
        icon="dashicons-megaphone",
        color="#f59e0b",
        description="Marketing ROI, campaign planning, and analytics",
    ),
    ToolCategory(
        slug="operations",
        label="Operations Tools",
        icon="dashicons-admin-settings",
        color="#6366f1",
        description="Project management, capacity planning, and workflows",
    ),
    ToolCategory(
        slug="hr",
        label="HR & Team Tools",
        icon="dashicons-groups",
        color="#8b5cf6",
        description="Salary calculators, hiring costs, and team management",
    ),
    ToolCategory(
        slug="sales",
        label="Sales Tools",
        icon="dashicons-cart",
        color="#ec4899",
        description="Pipeline calculators, commission tracking, and proposals",
    ),
    ToolCategory(
        slug="content",
        label="Content Tools",
        icon="dashicons-edit",
        color="#14b8a6",
        description="AI-powered content generation and writing tools",
    ),
    ToolCategory(
        slug="legal",
        label="Legal Tools",
        icon="dashicons-shield",
        color="#64748b",
        description="Contracts, policies, and compliance documents",
    ),
]

_SORTABLE_FIELDS = {"name", "slug", "category", "tier"}


class ToolRegistry:
    """In-process catalog of tools, keyed by slug."""

    def __init__(self) -> None:
        self._tools: Dict[str, ToolDescriptor] = {}
        self._registered_at: Dict[str, datetime] = {}
        self._categories: Dict[str, ToolCategory] = {c.slug: c for c in DEFAULT_CATEGORIES}

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, slug: str) -> bool:
        return slug in self._tools

    def register(self, tool: ToolDescriptor) -> None:
        """Add a tool.

        Raises:
            ValueError: If the tool has no slug.
            DuplicateToolError: If the slug is already taken.
        """
        if not tool.slug:
            raise ValueError("Cannot register a tool without a slug")
        if tool.slug in self._tools:
            raise DuplicateToolError(tool.slug)

        self._tools[tool.slug] = tool
        self._registered_at[tool.slug] = datetime.now(timezone.utc)
        logger.debug("Registered tool '%s'", tool.slug)

    def unregister(self, slug: str) -> bool:
        if slug not in self._tools:
            return False
        del self._tools[slug]
        self._registered_at.pop(slug, None)
        return True

    def get(self, slug: str) -> Optional[ToolDescriptor]:
        return self._tools.get(slug)

    def require(self, slug: str) -> ToolDescriptor:
        tool = self._tools.get(slug)
        if tool is None:
            raise ToolNotFoundError(slug)
        return tool

    def exists(self, slug: str) -> bool:
        return slug in self._tools

    def list(
        self,
        category: Optional[str] = None,
        tier: Optional[Tier] = None,
        order_by: str = "name",
        descending: bool = False,
    ) -> List[ToolDescriptor]:
        """Tools filtered by category and/or required tier, sorted.

        Args:
            category: Only tools in this category.
            tier: Only tools whose required tier is exactly this tier.
            order_by: One of name, slug, category, tier.
            descending: Reverse the sort order.
        """
        if order_by not in _SORTABLE_FIELDS:
            raise ValueError(f"Cannot order tools by '{order_by}'")

        tools = list(self._tools.values())
        if category:
            tools = [t for t in tools if t.category == category]
        if tier:
            tools = [t for t in tools if t.required_tier == tier]

        return sorted(tools, key=lambda t: t.metadata()[order_by], reverse=descending)

    def count(self, category: Optional[str] = None, tier: Optional[Tier] = None) -> int:
        return len(self.list(category=category, tier=tier))

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def categories(self) -> List[ToolCategory]:
        return list(self._categories.values())

    def get_category(self, slug: str) -> Optional[ToolCategory]:
        return self._categories.get(slug)

    def register_category(self, category: ToolCategory) -> None:
        """Add or replace a category."""
        self._categories[category.slug] = category

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------

    def statistics(self) -> Dict[str, Any]:
        return {
            "total_tools": len(self._tools),
            "by_category": {slug: self.count(category=slug) for slug in self._categories},
            "by_tier": {tier.value: self.count(tier=tier) for tier in Tier},
        }

    def export(self) -> Dict[str, Any]:
        """JSON-ready snapshot of all tool metadata and categories."""
        return {
            "exported_at": datetime.now(timezone.utc).isoformat(),
            "tools": [
                {**tool.metadata(), "registered_at": self._registered_at[slug].isoformat()}
                for slug, tool in self._tools.items()
            ],
            "categories": [vars(category).copy() for category in self._categories.values()],
        }
