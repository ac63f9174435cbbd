"""
FastAPI Dependency Providers for the BTD Tools API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations.

Architecture:
- Settings, Supabase client, tool registry and AI provider config are
  cached per-process (lru_cache)
- Auth providers wrap backend.auth
- Repositories are instantiated per-request with the shared Supabase client
- Services and use cases are wired through dependency chains
"""

from functools import lru_cache
from typing import Iterable, Optional

from fastapi import Depends, Header, HTTPException, Request
from supabase import Client, create_client

from application.models import Requester, ToolDescriptor
from application.ports.calculation_repository import CalculationRepository
from application.ports.rate_counter_store import RateCounterStore
from application.ports.tier_resolver import TierResolver
from application.ports.usage_log_repository import UsageLogRepository
from backend.settings import Settings, get_settings as _get_settings

# Auth from existing module (wrap to maintain single source of truth)
from backend.auth import (
    get_current_user as _get_current_user,
    get_optional_user as _get_optional_user,
)

# Repositories
from infrastructure.db.calculation_repository import SupabaseCalculationRepository
from infrastructure.db.memory_rate_counter_repository import InMemoryRateCounterRepository
from infrastructure.db.rate_counter_repository import SupabaseRateCounterRepository
from infrastructure.db.subscription_tier_repository import SupabaseTierResolver
from infrastructure.db.usage_log_repository import SupabaseUsageLogRepository

# Services
from backend.ai import AIClientFactory, ProviderConfig, ProviderConfigSource, ProviderRouter
from backend.services.access_policy import AccessPolicyEngine
from backend.services.tool_registry import ToolRegistry
from backend.tools import register_default_tools

# Use cases
from application.use_cases.cleanup_rate_limits import CleanupRateLimitsUseCase
from application.use_cases.invoke_tool import InvokeToolUseCase


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.

    Returns:
        Settings: Application settings instance
    """
    return _get_settings()


# =============================================================================
# Supabase Client Provider
# =============================================================================


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Returns None if credentials are not configured.
    """
    settings = _get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        return None

    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase_client_required() -> Client:
    """
    Get Supabase client instance, raising if not configured.

    Raises:
        HTTPException: 503 if Supabase is not configured
    """
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Database not available. Supabase credentials not configured.",
        )
    return client


# =============================================================================
# Authentication Providers
# =============================================================================


async def get_current_user(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Get the current authenticated user ID.

    Raises:
        HTTPException: 401 if authentication fails
    """
    return await _get_current_user(authorization=authorization, settings=settings)


async def get_optional_user(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> Optional[str]:
    """
    Get the current user ID if a bearer token is sent, None otherwise.

    Tool endpoints use this so anonymous visitors can run free tools.
    """
    return await _get_optional_user(authorization=authorization, settings=settings)


def client_ip(request: Request, trusted_proxies: Iterable[str] = ()) -> Optional[str]:
    """
    Address of the caller.

    X-Forwarded-For is only read when the direct peer is a trusted proxy.
    """
    peer = request.client.host if request.client else None
    if peer is not None and peer in trusted_proxies:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            first = forwarded.split(",")[0].strip()
            if first:
                return first
    return peer


def get_requester(
    request: Request,
    user_id: Optional[str] = Depends(get_optional_user),
    settings: Settings = Depends(get_settings),
) -> Requester:
    """Identity used for gating and quota counting."""
    try:
        return Requester(
            user_id=user_id,
            ip_address=client_ip(request, settings.trusted_proxy_ips),
        )
    except ValueError:
        raise HTTPException(status_code=400, detail="Unable to identify requester")


# =============================================================================
# Tool Registry
# =============================================================================


@lru_cache
def get_tool_registry() -> ToolRegistry:
    """Process-wide registry holding the built-in tools."""
    registry = ToolRegistry()
    register_default_tools(registry)
    return registry


def require_tool(
    slug: str,
    registry: ToolRegistry = Depends(get_tool_registry),
) -> ToolDescriptor:
    """Resolve the {slug} path parameter to a registered tool."""
    tool = registry.get(slug)
    if tool is None:
        raise HTTPException(status_code=404, detail=f"Tool '{slug}' not found")
    return tool


# =============================================================================
# AI Provider Routing
# =============================================================================


def get_ai_client_factory():
    """
    Get AIClientFactory class for creating AI clients.

    Returns the class itself (all methods are static), which allows
    test overrides via dependency_overrides.
    """
    return AIClientFactory


@lru_cache
def get_provider_config_source() -> ProviderConfigSource:
    """Shared provider config; publish() a new ProviderConfig to switch providers."""
    return ProviderConfigSource(ProviderConfig.from_settings(_get_settings()))


def get_provider_router(
    config_source: ProviderConfigSource = Depends(get_provider_config_source),
    factory=Depends(get_ai_client_factory),
) -> ProviderRouter:
    return ProviderRouter(config_source, factory=factory)


# =============================================================================
# Repository Providers
# =============================================================================


@lru_cache
def get_memory_rate_counter_store() -> InMemoryRateCounterRepository:
    """Single in-process counter store (RATE_LIMIT_STORE=memory)."""
    return InMemoryRateCounterRepository()


def get_rate_counter_store(
    settings: Settings = Depends(get_settings),
) -> RateCounterStore:
    """Get the configured usage counter store."""
    if settings.rate_limit_store == "memory":
        return get_memory_rate_counter_store()
    return SupabaseRateCounterRepository(get_supabase_client_required())


def get_tier_resolver(
    client: Client = Depends(get_supabase_client_required),
    settings: Settings = Depends(get_settings),
) -> TierResolver:
    """Get subscription tier resolver instance."""
    return SupabaseTierResolver(client, settings.subscription_products)


def get_calculation_repository(
    client: Client = Depends(get_supabase_client_required),
) -> CalculationRepository:
    """Get calculation repository instance."""
    return SupabaseCalculationRepository(client)


def get_usage_log_repository(
    client: Client = Depends(get_supabase_client_required),
) -> UsageLogRepository:
    """Get usage log repository instance."""
    return SupabaseUsageLogRepository(client)


# =============================================================================
# Services & Use Cases
# =============================================================================


def get_access_policy_engine(
    store: RateCounterStore = Depends(get_rate_counter_store),
    tier_resolver: TierResolver = Depends(get_tier_resolver),
    settings: Settings = Depends(get_settings),
) -> AccessPolicyEngine:
    return AccessPolicyEngine(
        store=store,
        tier_resolver=tier_resolver,
        policy=settings.rate_limit_policy,
        rate_limiting_enabled=settings.enable_rate_limiting,
    )


def get_invoke_tool_use_case(
    access_policy: AccessPolicyEngine = Depends(get_access_policy_engine),
    calculation_repo: CalculationRepository = Depends(get_calculation_repository),
    usage_log_repo: UsageLogRepository = Depends(get_usage_log_repository),
    provider_router: ProviderRouter = Depends(get_provider_router),
    settings: Settings = Depends(get_settings),
) -> InvokeToolUseCase:
    """Get the tool invocation use case with all dependencies wired."""
    return InvokeToolUseCase(
        access_policy=access_policy,
        calculation_repo=calculation_repo,
        usage_log_repo=usage_log_repo,
        provider_router=provider_router,
        analytics_enabled=settings.enable_analytics,
    )


def get_cleanup_rate_limits_use_case(
    store: RateCounterStore = Depends(get_rate_counter_store),
) -> CleanupRateLimitsUseCase:
    return CleanupRateLimitsUseCase(store)


# =============================================================================
# Internal Service Auth
# =============================================================================


def verify_internal_key(
    x_internal_key: str = Header(..., alias="X-Internal-Key"),
    settings: Settings = Depends(get_settings),
) -> None:
    """Verify the internal API key."""
    if not settings.internal_api_key:
        raise HTTPException(status_code=503, detail="Internal API key not configured")
    if x_internal_key != settings.internal_api_key:
        raise HTTPException(status_code=403, detail="Invalid internal API key")
