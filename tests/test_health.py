"""
Health endpoint tests using pytest-asyncio and httpx.AsyncClient.
"""

import pytest


@pytest.mark.asyncio
async def test_health_endpoint(test_client):
    """Test the health check endpoint returns expected structure."""
    response = await test_client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()

    assert "status" in data
    assert "uptime" in data
    assert "checks" in data
    assert isinstance(data["checks"], dict)

    # Status should be "ok" or "degraded"
    assert data["status"] in ["ok", "degraded"]


@pytest.mark.asyncio
async def test_root_health_needs_no_token(test_client):
    response = await test_client.get("/health")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_health_reports_version_and_database_check(test_client):
    data = (await test_client.get("/api/v1/health")).json()

    assert data["version"]
    assert "database" in data["checks"]
    assert data["uptime"].startswith("PT")


def test_run_serves_app_with_configured_address(monkeypatch):
    import uvicorn

    from agency import main
    from agency.core.config import settings

    served = {}
    monkeypatch.setattr(uvicorn, "run", lambda app, host, port: served.update(app=app, host=host, port=port))

    main.run()

    assert served == {"app": main.app, "host": settings.HOST, "port": settings.PORT}
