"""
Centralized settings configuration using Pydantic BaseSettings.

All environment variables are defined here with types, defaults, and validation.
Use get_settings() for dependency injection compatibility in FastAPI.

Usage:
    from backend.settings import get_settings, Settings

    # In FastAPI endpoints (dependency injection)
    @app.get("/")
    def read_root(settings: Settings = Depends(get_settings)):
        return {"environment": settings.environment}

    # Direct access (module-level)
    settings = get_settings()
    print(settings.ai_provider)
"""

import json
import logging
from functools import lru_cache
from typing import Annotated, Dict, List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from application.models import RateLimitPolicy, Tier

VALID_AI_PROVIDERS = {"gemini", "openai", "anthropic"}
VALID_RATE_LIMIT_STORES = {"supabase", "memory"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR)",
    )

    # -------------------------------------------------------------------------
    # Supabase Database
    # -------------------------------------------------------------------------
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL",
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key (full access)",
    )

    @property
    def supabase_key(self) -> Optional[str]:
        """Get the Supabase key.

        Counters and analytics are written for anonymous requesters too,
        so the service role key is required.
        """
        return self.supabase_service_role_key

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------
    jwt_secret: Optional[str] = Field(
        default=None,
        description="Shared secret for HS256 bearer tokens",
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm",
    )

    # -------------------------------------------------------------------------
    # AI Services
    # -------------------------------------------------------------------------
    ai_provider: str = Field(
        default="gemini",
        description="Text generation provider: gemini, openai, anthropic",
    )
    gemini_api_key: Optional[str] = Field(
        default=None,
        description="Google Gemini API key",
    )
    openai_api_key: Optional[str] = Field(
        default=None,
        description="OpenAI API key",
    )
    anthropic_api_key: Optional[str] = Field(
        default=None,
        description="Anthropic API key for Claude",
    )
    gemini_model: str = Field(default="gemini-pro")
    openai_model: str = Field(default="gpt-4")
    anthropic_model: str = Field(default="claude-3-sonnet-20240229")
    ai_timeout: float = Field(
        default=30.0,
        description="Seconds before an AI request is abandoned",
    )
    ai_max_tokens: int = Field(
        default=4096,
        description="Maximum output tokens per generation",
    )
    ai_temperature: float = Field(
        default=0.7,
        description="Sampling temperature (0.0 - 2.0)",
    )

    # -------------------------------------------------------------------------
    # Tools
    # -------------------------------------------------------------------------
    enable_rate_limiting: bool = Field(
        default=True,
        description="Enforce per-tool usage quotas",
    )
    enable_analytics: bool = Field(
        default=True,
        description="Write usage log entries for tool interactions",
    )
    rate_limit_store: str = Field(
        default="supabase",
        description="Usage counter backend: supabase, memory (single process only)",
    )

    # -------------------------------------------------------------------------
    # Rate Limits (uses per day, -1 = unlimited)
    # -------------------------------------------------------------------------
    rate_limit_free_daily: int = Field(default=10)
    rate_limit_starter_daily: int = Field(default=100)
    rate_limit_pro_daily: int = Field(default=-1)
    rate_limit_business_daily: int = Field(default=-1)

    # -------------------------------------------------------------------------
    # Subscriptions (billing product IDs per tier)
    # -------------------------------------------------------------------------
    starter_product_id: Optional[str] = Field(default=None)
    pro_product_id: Optional[str] = Field(default=None)
    business_product_id: Optional[str] = Field(default=None)

    # -------------------------------------------------------------------------
    # CORS
    # -------------------------------------------------------------------------
    allowed_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        description="Allowed CORS origins. If empty, defaults to localhost:3000/3001.",
    )

    # -------------------------------------------------------------------------
    # Proxies
    # -------------------------------------------------------------------------
    trusted_proxy_ips: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        description="Peer addresses whose X-Forwarded-For header is honored",
    )

    # -------------------------------------------------------------------------
    # Observability - Sentry
    # -------------------------------------------------------------------------
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )
    render_git_commit: Optional[str] = Field(
        default=None,
        description="Git commit SHA provided by Render (RENDER_GIT_COMMIT)",
    )

    # -------------------------------------------------------------------------
    # Internal API
    # -------------------------------------------------------------------------
    internal_api_key: Optional[str] = Field(
        default=None,
        description="Shared secret for internal service-to-service calls",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("allowed_origins", "trusted_proxy_ips", mode="before")
    @classmethod
    def parse_string_list(cls, v: Union[str, List[str], None]) -> List[str]:
        """Accept JSON array, comma-separated string, or list."""
        if v is None:
            return []
        if isinstance(v, list):
            return v
        v = v.strip()
        if not v:
            return []
        if v.startswith("["):
            return json.loads(v)
        return [item.strip() for item in v.split(",") if item.strip()]

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    @field_validator("ai_provider")
    @classmethod
    def validate_ai_provider(cls, v: str) -> str:
        if v.lower() not in VALID_AI_PROVIDERS:
            raise ValueError(
                f"Invalid AI provider '{v}'. Must be one of: {sorted(VALID_AI_PROVIDERS)}"
            )
        return v.lower()

    @field_validator("rate_limit_store")
    @classmethod
    def validate_rate_limit_store(cls, v: str) -> str:
        if v.lower() not in VALID_RATE_LIMIT_STORES:
            raise ValueError(
                f"Invalid rate limit store '{v}'. Must be one of: {sorted(VALID_RATE_LIMIT_STORES)}"
            )
        return v.lower()

    @field_validator("ai_temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError("ai_temperature must be between 0.0 and 2.0")
        return v

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"

    @property
    def allowed_origins_list(self) -> List[str]:
        return self.allowed_origins or ["http://localhost:3000", "http://localhost:3001"]

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level.upper(), logging.INFO)

    @property
    def rate_limit_policy(self) -> RateLimitPolicy:
        """Global daily quotas built from the rate limit settings."""
        return RateLimitPolicy.daily(
            free=self.rate_limit_free_daily,
            starter=self.rate_limit_starter_daily,
            pro=self.rate_limit_pro_daily,
            business=self.rate_limit_business_daily,
        )

    @property
    def subscription_products(self) -> Dict[str, Tier]:
        """Map of billing product ID to the tier it grants."""
        products = {
            self.starter_product_id: Tier.STARTER,
            self.pro_product_id: Tier.PRO,
            self.business_product_id: Tier.BUSINESS,
        }
        return {str(product_id): tier for product_id, tier in products.items() if product_id}


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Application settings instance
    """
    return Settings()
