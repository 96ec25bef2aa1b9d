"""
Pressroom Backend — Health Check Tests
========================================
"""

from unittest.mock import AsyncMock

import pytest


@pytest.mark.asyncio
async def test_healthy(test_client):
    response = await test_client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["articles_database"] == "connected"
    assert body["admins_database"] == "connected"
    assert body["image_storage"] == "available"
    assert body["uptime_seconds"] >= 0


@pytest.mark.asyncio
async def test_degraded_when_storage_down(app, test_client, monkeypatch):
    monkeypatch.setattr(
        app.state.upload_adapter.storage, "health_check", AsyncMock(return_value=False)
    )
    response = await test_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"
    assert response.json()["image_storage"] == "unavailable"


@pytest.mark.asyncio
async def test_unhealthy_when_database_down(app, test_client, monkeypatch):
    monkeypatch.setattr(app.state.admins_db, "ping", AsyncMock(return_value=False))
    response = await test_client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"
    assert response.json()["admins_database"] == "disconnected"
    assert response.json()["articles_database"] == "connected"
