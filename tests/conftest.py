"""Shared fixtures: settings, in-memory fakes and a wired TestClient."""

import time
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import jwt as pyjwt
import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from api.deps import (
    get_calculation_repository,
    get_provider_router,
    get_rate_counter_store,
    get_settings,
    get_tier_resolver,
    get_tool_registry,
    get_usage_log_repository,
)
from application.models import (
    CalculationRecord,
    PureCompute,
    Tier,
    ToolDescriptor,
    UsageLogEntry,
)
from backend.main import create_app
from backend.services.tool_registry import ToolRegistry
from backend.settings import Settings
from backend.tools import register_default_tools
from infrastructure.db.memory_rate_counter_repository import InMemoryRateCounterRepository

TEST_USER_ID = "user_test_12345"
JWT_SECRET = "test-jwt-secret"
INTERNAL_API_KEY = "test-internal-key"


# ============================================================================
# In-Memory Fakes (deterministic, no network)
# ============================================================================


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeTierResolver:
    def __init__(self, tiers: Optional[Dict[str, Tier]] = None) -> None:
        self.tiers = dict(tiers or {})
        self.calls: List[str] = []

    def resolve_tier(self, user_id: str) -> Tier:
        self.calls.append(user_id)
        return self.tiers.get(user_id, Tier.FREE)


class FakeCalculationRepository:
    def __init__(self) -> None:
        self.records: List[Dict[str, Any]] = []

    def create(self, record: CalculationRecord) -> Dict[str, Any]:
        row = {
            "id": len(self.records) + 1,
            "tool_slug": record.tool_slug,
            "input_data": record.input_data,
            "result_data": record.result_data,
            "user_id": record.user_id,
            "ip_address": record.ip_address,
            "user_agent": record.user_agent,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self.records.append(row)
        return row

    def list_for_user(self, user_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        rows = [r for r in self.records if r["user_id"] == user_id]
        return list(reversed(rows))[:limit]

    def get_tool_stats(self, tool_slug: str, days: int = 30) -> Dict[str, Any]:
        rows = [r for r in self.records if r["tool_slug"] == tool_slug]
        users = {r["user_id"] for r in rows if r["user_id"]}
        return {
            "total_uses": len(rows),
            "unique_users": len(users),
            "avg_per_user": round(len(rows) / max(len(users), 1), 1),
            "today": len(rows),
            "this_week": len(rows),
            "this_month": len(rows),
        }


class FakeUsageLogRepository:
    def __init__(self) -> None:
        self.entries: List[UsageLogEntry] = []

    def log(self, entry: UsageLogEntry) -> None:
        self.entries.append(entry)

    def get_daily_usage(self, tool_slug: str, days: int = 30) -> List[Dict[str, Any]]:
        count = sum(1 for e in self.entries if e.tool_slug == tool_slug)
        return [{"date": "2024-03-15", "count": count}] if count else []

    def get_popular_tools(self, days: int = 30, limit: int = 10) -> List[Dict[str, Any]]:
        counts: Dict[str, int] = {}
        for entry in self.entries:
            counts[entry.tool_slug] = counts.get(entry.tool_slug, 0) + 1
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [{"tool_slug": slug, "usage_count": n} for slug, n in ranked[:limit]]


def make_tool(slug="roi-calculator", required_tier=Tier.FREE, rate_limits=None) -> ToolDescriptor:
    """A calculator descriptor with a no-op computation."""
    return ToolDescriptor(
        slug=slug,
        name=slug,
        category="financial",
        behavior=PureCompute(lambda values: {}),
        required_tier=required_tier,
        rate_limits=rate_limits,
    )


def make_token(
    user_id: Optional[str] = TEST_USER_ID,
    secret: str = JWT_SECRET,
    expired: bool = False,
) -> str:
    """Create an HS256 bearer token."""
    now = int(time.time())
    payload: Dict[str, Any] = {
        "iat": now - 60,
        "exp": (now - 120) if expired else (now + 3600),
    }
    if user_id is not None:
        payload["sub"] = user_id
    return pyjwt.encode(payload, secret, algorithm="HS256")


def auth_headers(user_id: str = TEST_USER_ID) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with minimal configuration."""
    return Settings(
        environment="test",
        supabase_url="https://test.supabase.co",
        supabase_service_role_key="test-key",
        jwt_secret=JWT_SECRET,
        internal_api_key=INTERNAL_API_KEY,
        rate_limit_store="memory",
        ai_provider="gemini",
        _env_file=None,
    )


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc))


@pytest.fixture
def store() -> InMemoryRateCounterRepository:
    return InMemoryRateCounterRepository()


@pytest.fixture
def tier_resolver() -> FakeTierResolver:
    return FakeTierResolver()


@pytest.fixture
def calculation_repo() -> FakeCalculationRepository:
    return FakeCalculationRepository()


@pytest.fixture
def usage_log_repo() -> FakeUsageLogRepository:
    return FakeUsageLogRepository()


@pytest.fixture
def registry() -> ToolRegistry:
    return register_default_tools(ToolRegistry())


@pytest.fixture
def provider_router() -> MagicMock:
    router = MagicMock()
    router.generate.return_value = "Generated copy"
    return router


@pytest.fixture
def app(
    test_settings,
    store,
    tier_resolver,
    calculation_repo,
    usage_log_repo,
    registry,
    provider_router,
):
    """Create the FastAPI app with storage, billing and AI replaced by fakes."""
    application = create_app(settings=test_settings)
    application.dependency_overrides[get_settings] = lambda: test_settings
    application.dependency_overrides[get_rate_counter_store] = lambda: store
    application.dependency_overrides[get_tier_resolver] = lambda: tier_resolver
    application.dependency_overrides[get_calculation_repository] = lambda: calculation_repo
    application.dependency_overrides[get_usage_log_repository] = lambda: usage_log_repo
    application.dependency_overrides[get_tool_registry] = lambda: registry
    application.dependency_overrides[get_provider_router] = lambda: provider_router
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
