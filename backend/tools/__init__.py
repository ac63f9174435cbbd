"""Built-in tool catalog."""

from backend.services.tool_registry import ToolRegistry
from backend.tools.content import CONTENT_TOOLS
from backend.tools.documents import DOCUMENT_TOOLS
from backend.tools.financial import FINANCIAL_TOOLS

BUILTIN_TOOLS = FINANCIAL_TOOLS + CONTENT_TOOLS + DOCUMENT_TOOLS


def register_default_tools(registry: ToolRegistry) -> ToolRegistry:
    """Register every built-in tool on `registry` and return it."""
    for tool in BUILTIN_TOOLS:
        registry.register(tool)
    return registry


__all__ = ["BUILTIN_TOOLS", "register_default_tools"]
