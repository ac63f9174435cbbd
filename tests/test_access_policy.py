"""Tests for AccessPolicyEngine: tier gating, quotas and storage failures."""

from unittest.mock import MagicMock

import pytest

from application.errors import StorageError
from application.models import (
    UNLIMITED,
    ErrorCode,
    Period,
    RateLimitPolicy,
    Requester,
    Tier,
)
from backend.services.access_policy import AccessPolicyEngine
from tests.conftest import FakeTierResolver, make_tool

ANON = Requester(ip_address="203.0.113.7")


@pytest.fixture
def engine(store, tier_resolver, clock):
    return AccessPolicyEngine(store=store, tier_resolver=tier_resolver, clock=clock)


class TestTierGating:
    @pytest.mark.unit
    def test_anonymous_requester_is_free_without_lookup(self, engine, tier_resolver):
        assert engine.resolve_tier(ANON) is Tier.FREE
        assert tier_resolver.calls == []

    @pytest.mark.unit
    def test_tier_ordering(self, clock):
        store = MagicMock()
        store.increment_if_below.return_value = (1, True)
        resolver = FakeTierResolver({"s": Tier.STARTER, "p": Tier.PRO, "b": Tier.BUSINESS})
        engine = AccessPolicyEngine(store, resolver, clock=clock)
        pro_tool = make_tool(required_tier=Tier.PRO)

        assert not engine.authorize(pro_tool, Requester(user_id="s")).allowed
        assert engine.authorize(pro_tool, Requester(user_id="p")).allowed
        assert engine.authorize(pro_tool, Requester(user_id="b")).allowed

    @pytest.mark.unit
    def test_tier_denial_never_touches_store(self, clock):
        store = MagicMock()
        engine = AccessPolicyEngine(store, FakeTierResolver(), clock=clock)

        result = engine.authorize(make_tool(required_tier=Tier.STARTER), ANON)

        assert not result.allowed
        assert result.reason is ErrorCode.UPGRADE_REQUIRED
        assert store.method_calls == []


class TestQuota:
    @pytest.mark.unit
    def test_free_quota_counts_down_then_denies(self, engine):
        tool = make_tool()
        remaining = [engine.authorize(tool, ANON).remaining for _ in range(10)]
        assert remaining == [9, 8, 7, 6, 5, 4, 3, 2, 1, 0]

        denied = engine.authorize(tool, ANON)
        assert not denied.allowed
        assert denied.reason is ErrorCode.RATE_LIMITED
        assert denied.remaining == 0
        assert denied.reset_at is not None

    @pytest.mark.unit
    def test_denied_attempts_do_not_increase_count(self, engine, store):
        tool = make_tool()
        for _ in range(15):
            engine.authorize(tool, ANON)
        counter = store.get(tool.slug, ANON.key, Period.DAY)
        assert counter.count == 10

    @pytest.mark.unit
    def test_counters_are_per_tool_and_per_requester(self, engine):
        roi = make_tool("roi-calculator")
        margin = make_tool("profit-margin-calculator")
        for _ in range(10):
            engine.authorize(roi, ANON)

        assert not engine.authorize(roi, ANON).allowed
        assert engine.authorize(margin, ANON).allowed
        assert engine.authorize(roi, Requester(ip_address="198.51.100.1")).allowed

    @pytest.mark.unit
    def test_unlimited_tier_skips_store(self, clock):
        store = MagicMock()
        engine = AccessPolicyEngine(store, FakeTierResolver({"p": Tier.PRO}), clock=clock)
        requester = Requester(user_id="p")

        for _ in range(1000):
            result = engine.authorize(make_tool(), requester)
            assert result.allowed
            assert result.remaining == UNLIMITED
        assert store.method_calls == []

    @pytest.mark.unit
    def test_rate_limiting_disabled_allows_everything(self, store, tier_resolver, clock):
        engine = AccessPolicyEngine(store, tier_resolver, rate_limiting_enabled=False, clock=clock)
        for _ in range(20):
            assert engine.authorize(make_tool(), ANON).allowed
        assert store.get("roi-calculator", ANON.key, Period.DAY) is None

    @pytest.mark.unit
    def test_tool_policy_overrides_global_policy(self, engine):
        tool = make_tool(rate_limits=RateLimitPolicy.daily(free=2, starter=5, pro=-1, business=-1))
        assert engine.authorize(tool, ANON).remaining == 1
        assert engine.authorize(tool, ANON).remaining == 0
        assert not engine.authorize(tool, ANON).allowed

    @pytest.mark.unit
    def test_quota_resets_after_window(self, engine, clock):
        tool = make_tool()
        for _ in range(10):
            engine.authorize(tool, ANON)
        assert not engine.authorize(tool, ANON).allowed

        clock.now = clock.now.replace(hour=23, minute=59, second=59, microsecond=999999)
        clock.advance(microseconds=1)

        result = engine.authorize(tool, ANON)
        assert result.allowed
        assert result.remaining == 9


class TestStorageFailure:
    @pytest.mark.unit
    def test_storage_error_fails_closed(self, tier_resolver, clock, caplog):
        store = MagicMock()
        store.increment_if_below.side_effect = StorageError("connection refused")
        engine = AccessPolicyEngine(store, tier_resolver, clock=clock)

        result = engine.authorize(make_tool(), ANON)

        assert not result.allowed
        assert result.reason is ErrorCode.STORAGE_ERROR
        assert "connection refused" in caplog.text


class TestRemainingUses:
    @pytest.mark.unit
    def test_remaining_does_not_consume(self, engine):
        tool = make_tool()
        assert engine.remaining_uses(tool, ANON) == 10
        assert engine.remaining_uses(tool, ANON) == 10

        engine.authorize(tool, ANON)
        assert engine.remaining_uses(tool, ANON) == 9

    @pytest.mark.unit
    def test_remaining_ignores_expired_counter(self, engine, clock):
        tool = make_tool()
        for _ in range(3):
            engine.authorize(tool, ANON)
        clock.advance(days=1)
        assert engine.remaining_uses(tool, ANON) == 10

    @pytest.mark.unit
    def test_remaining_unlimited(self, store, clock):
        engine = AccessPolicyEngine(store, FakeTierResolver({"b": Tier.BUSINESS}), clock=clock)
        assert engine.remaining_uses(make_tool(), Requester(user_id="b")) == UNLIMITED

    @pytest.mark.unit
    def test_remaining_propagates_storage_error(self, tier_resolver, clock):
        store = MagicMock()
        store.get.side_effect = StorageError("down")
        engine = AccessPolicyEngine(store, tier_resolver, clock=clock)
        with pytest.raises(StorageError):
            engine.remaining_uses(make_tool(), ANON)
