# SPDX-License-Identifier: MIT
"""Tests for health check endpoints."""


class TestRootEndpoint:
    """Test root endpoint (health check)."""

    def test_root_endpoint_exists(self, test_client):
        """Root endpoint should return 200."""
        response = test_client.get("/")
        assert response.status_code == 200

    def test_root_returns_status(self, test_client):
        """Root endpoint should return status field."""
        data = test_client.get("/").json()
        assert data["status"] == "ok"

    def test_root_returns_service_name(self, test_client):
        """Root endpoint should return service name."""
        data = test_client.get("/").json()
        assert "Concentration Heatmap" in data["service"]
