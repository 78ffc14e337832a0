"""Health endpoint tests."""

import pytest


@pytest.mark.asyncio
async def test_health_returns_ok(client):
    """Health reports status, version and user count to callers with a token."""
    resp = await client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["server"] == "ok"
    assert data["users"] == 2
    assert "version" in data


@pytest.mark.asyncio
async def test_health_requires_identity(unauthenticated_client):
    """Anonymous callers get a 401 envelope and no store details."""
    resp = await unauthenticated_client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"]["code"] == 401
    assert "users" not in data
