"""
Health endpoint tests.
"""

from unittest.mock import MagicMock, patch

import pytest


@pytest.mark.unit
def test_health_returns_ok(client):
    """GET /health returns 200 with status ok."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "btd-tools-api"}


@pytest.mark.unit
def test_health_ready_reports_checks(client):
    """GET /health/ready includes the configured backends."""
    supabase = MagicMock()
    with patch("api.routers.health.get_supabase_client", return_value=supabase):
        response = client.get("/health/ready")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"] == {
        "supabase": "ok",
        "rate_limit_store": "memory",
        "ai_provider": "gemini",
    }
    supabase.table.assert_called_once_with("tool_rate_limits")


@pytest.mark.unit
def test_health_ready_without_supabase(client):
    with patch("api.routers.health.get_supabase_client", return_value=None):
        data = client.get("/health/ready").json()
    assert data["checks"]["supabase"] == "not_configured"


@pytest.mark.unit
def test_health_ready_returns_503_when_unreachable(client):
    supabase = MagicMock()
    supabase.table.side_effect = ConnectionError("refused")
    with patch("api.routers.health.get_supabase_client", return_value=supabase):
        response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.json()["status"] == "not_ready"
    assert response.json()["checks"]["supabase"] == "unavailable"
