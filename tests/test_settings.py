"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from application.models import UNLIMITED, Period, Tier
from backend.settings import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "ENVIRONMENT",
        "AI_PROVIDER",
        "RATE_LIMIT_STORE",
        "ALLOWED_ORIGINS",
        "TRUSTED_PROXY_IPS",
        "RATE_LIMIT_FREE_DAILY",
        "STARTER_PRODUCT_ID",
        "PRO_PRODUCT_ID",
        "BUSINESS_PRODUCT_ID",
    ):
        monkeypatch.delenv(name, raising=False)


def make_settings(**kwargs) -> Settings:
    return Settings(_env_file=None, **kwargs)


@pytest.mark.unit
class TestValidators:
    def test_defaults(self):
        settings = make_settings()
        assert settings.environment == "development"
        assert settings.ai_provider == "gemini"
        assert settings.rate_limit_store == "supabase"

    def test_values_are_normalized(self):
        settings = make_settings(environment="TEST", ai_provider="OpenAI", rate_limit_store="Memory")
        assert settings.is_test
        assert settings.ai_provider == "openai"
        assert settings.rate_limit_store == "memory"

    @pytest.mark.parametrize(
        "field,value",
        [
            ("environment", "qa"),
            ("ai_provider", "cohere"),
            ("rate_limit_store", "redis"),
            ("ai_temperature", 2.5),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            make_settings(**{field: value})


@pytest.mark.unit
class TestListSettings:
    def test_comma_separated(self, monkeypatch):
        monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")
        assert make_settings().allowed_origins == ["https://a.example", "https://b.example"]

    def test_json_array(self, monkeypatch):
        monkeypatch.setenv("ALLOWED_ORIGINS", '["https://a.example"]')
        assert make_settings().allowed_origins == ["https://a.example"]

    def test_empty_uses_localhost(self):
        assert make_settings().allowed_origins_list == [
            "http://localhost:3000",
            "http://localhost:3001",
        ]

    def test_trusted_proxies_comma_separated(self, monkeypatch):
        monkeypatch.setenv("TRUSTED_PROXY_IPS", "10.0.0.1,10.0.0.2")
        assert make_settings().trusted_proxy_ips == ["10.0.0.1", "10.0.0.2"]

    def test_no_trusted_proxies_by_default(self):
        assert make_settings().trusted_proxy_ips == []


@pytest.mark.unit
class TestDerivedValues:
    def test_rate_limit_policy(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_FREE_DAILY", "5")
        policy = make_settings().rate_limit_policy

        assert policy.quota_for(Tier.FREE, Period.DAY) == 5
        assert policy.quota_for(Tier.STARTER, Period.DAY) == 100
        assert policy.quota_for(Tier.BUSINESS, Period.DAY) == UNLIMITED

    def test_subscription_products_skip_unset(self):
        settings = make_settings(starter_product_id="101", business_product_id="303")
        assert settings.subscription_products == {"101": Tier.STARTER, "303": Tier.BUSINESS}

    def test_log_level_value(self):
        assert make_settings(log_level="debug").log_level_value == 10
        assert make_settings(log_level="nonsense").log_level_value == 20
