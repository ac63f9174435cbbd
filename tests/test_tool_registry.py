"""Tests for ToolRegistry."""

import pytest

from application.errors import DuplicateToolError, ToolNotFoundError
from application.models import Tier, ToolCategory
from backend.services.tool_registry import ToolRegistry
from backend.tools import BUILTIN_TOOLS
from tests.conftest import make_tool


@pytest.mark.unit
def test_register_and_lookup():
    registry = ToolRegistry()
    tool = make_tool("roi-calculator")
    registry.register(tool)

    assert registry.get("roi-calculator") is tool
    assert registry.require("roi-calculator") is tool
    assert "roi-calculator" in registry
    assert len(registry) == 1


@pytest.mark.unit
def test_duplicate_slug_rejected():
    registry = ToolRegistry()
    registry.register(make_tool("roi-calculator"))
    with pytest.raises(DuplicateToolError) as exc_info:
        registry.register(make_tool("roi-calculator"))
    assert exc_info.value.slug == "roi-calculator"


@pytest.mark.unit
def test_empty_slug_rejected():
    with pytest.raises(ValueError):
        ToolRegistry().register(make_tool(""))


@pytest.mark.unit
def test_require_unknown_slug():
    with pytest.raises(ToolNotFoundError):
        ToolRegistry().require("nope")
    assert ToolRegistry().get("nope") is None


@pytest.mark.unit
def test_unregister():
    registry = ToolRegistry()
    registry.register(make_tool("a"))
    assert registry.unregister("a") is True
    assert registry.unregister("a") is False
    assert not registry.exists("a")


@pytest.mark.unit
def test_builtin_catalog(registry):
    assert len(registry) == len(BUILTIN_TOOLS)
    assert registry.get("roi-calculator").required_tier is Tier.FREE
    assert registry.get("break-even-calculator").required_tier is Tier.STARTER
    assert registry.get("blog-outline-generator").required_tier is Tier.PRO


@pytest.mark.unit
def test_list_filters_and_orders(registry):
    financial = registry.list(category="financial")
    assert [t.slug for t in financial] == [
        "break-even-calculator",
        "profit-margin-calculator",
        "roi-calculator",
    ]

    starter = registry.list(tier=Tier.STARTER, order_by="slug", descending=True)
    assert [t.slug for t in starter] == ["product-description-generator", "break-even-calculator"]


@pytest.mark.unit
def test_list_rejects_unknown_order_field(registry):
    with pytest.raises(ValueError):
        registry.list(order_by="created_by")


@pytest.mark.unit
def test_categories_and_statistics(registry):
    assert registry.get_category("financial").label == "Financial Tools"
    registry.register_category(ToolCategory(slug="events", label="Events"))
    assert registry.get_category("events") is not None

    stats = registry.statistics()
    assert stats["total_tools"] == len(BUILTIN_TOOLS)
    assert stats["by_category"]["financial"] == 3
    assert stats["by_category"]["events"] == 0
    assert stats["by_tier"] == {"free": 3, "starter": 2, "pro": 1, "business": 0}


@pytest.mark.unit
def test_export(registry):
    exported = registry.export()
    slugs = {tool["slug"] for tool in exported["tools"]}
    assert "roi-calculator" in slugs
    assert all("registered_at" in tool for tool in exported["tools"])
    assert any(c["slug"] == "content" for c in exported["categories"])
