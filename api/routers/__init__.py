"""
Router package for the BTD Tools API.

This package contains all API routers organized by domain:
- health: Health check endpoints
- tools: Tool catalog, invocation and usage endpoints
- analytics: Internal usage statistics
- internal: Internal maintenance endpoints
"""

from api.routers.health import router as health_router
from api.routers.tools import router as tools_router
from api.routers.analytics import router as analytics_router
from api.routers.internal import router as internal_router

__all__ = [
    "health_router",
    "tools_router",
    "analytics_router",
    "internal_router",
]
