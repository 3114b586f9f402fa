"""
Health and metrics endpoint tests - fast feedback on API availability.
"""

import pytest
from httpx import AsyncClient

from news_api.config import get_settings


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    """GET /api/v1/health returns 200, status ok and the app name."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data == {"status": "ok", "app": get_settings().app_name}


@pytest.mark.asyncio
async def test_ready(client: AsyncClient):
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "ready"


@pytest.mark.asyncio
async def test_metrics_exposed(client: AsyncClient):
    response = await client.get("/metrics/")
    assert response.status_code == 200
    assert "python_info" in response.text
