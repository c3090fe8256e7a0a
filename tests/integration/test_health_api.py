"""
Integration tests for the health endpoint, security headers and the
general per-IP limit.
"""

import pytest

from helpers import ScriptedRewriteService
from resume.config import TailoringConfig


class UnreachableRewriteService(ScriptedRewriteService):
    async def is_available(self):
        return False


@pytest.mark.integration
def test_health_reports_every_service(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["services"] == {"database": "up", "llm": "up", "cache": "up"}
    assert body["app"] == "AI Resume Tailor"
    assert body["uptime"] >= 0


@pytest.mark.integration
@pytest.mark.parametrize("rewrite_service", [UnreachableRewriteService()])
def test_unreachable_provider_is_unhealthy(client, rewrite_service):
    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["services"]["llm"] == "down"


@pytest.mark.integration
def test_security_headers_on_every_response(client):
    for response in (client.get("/health"), client.get("/api/generations")):
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "frame-ancestors 'none'" in response.headers["Content-Security-Policy"]
        assert response.headers["Strict-Transport-Security"].startswith("max-age=31536000")


@pytest.mark.integration
@pytest.mark.parametrize("tailoring_config", [
    TailoringConfig(rate_limits={"ip": {"window_ms": 60_000, "max_requests": 2}})
])
def test_general_limit_covers_all_api_routes(client, tailoring_config):
    assert client.get("/api/me").status_code == 200
    assert client.get("/api/generations").status_code == 401

    response = client.get("/api/me")
    assert response.status_code == 429
    assert response.json() == {"error": "Too many requests, please try again later."}

    # Health checks are not counted
    assert client.get("/health").status_code == 200
