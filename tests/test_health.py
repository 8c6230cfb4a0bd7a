# ==============================================================================
# HEALTH ENDPOINT TESTS
# ==============================================================================

from __future__ import annotations

import pytest


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.mark.asyncio
    async def test_health_check(self, client):
        """Test health check endpoint returns correct status."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "local"
        assert "version" in data

    @pytest.mark.asyncio
    async def test_root_endpoint(self, client):
        """Test root endpoint returns API info."""
        response = await client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert "name" in data
        assert data["health"] == "/health"

    @pytest.mark.asyncio
    async def test_response_headers(self, client):
        response = await client.get("/health")
        assert "x-request-id" in response.headers
        assert "x-response-time" in response.headers
        assert response.headers["x-storage-mode"] == "local"
