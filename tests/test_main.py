"""Tests for main application endpoints."""

from fastapi.testclient import TestClient

from gasledger.main import app

client = TestClient(app)


def test_health_check():
    """Test health check endpoint."""
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "gasledger"


def test_reading_routes_registered():
    """Test that the ledger routes are exposed under /api."""
    paths = client.get("/openapi.json").json()["paths"]
    assert "/api/readings/" in paths
    assert "/api/readings/dumping" in paths
    assert "/api/readings/stats/operator-counts" in paths
