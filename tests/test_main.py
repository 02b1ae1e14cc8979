"""
Basic tests for the Synoptic Observation Desk API.

This module contains tests for the application entry points.
"""

from obsdesk import __version__


async def test_root_endpoint(client):
    """Test the root endpoint returns correct response."""
    response = await client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["version"] == __version__
    assert "message" in data
    assert "docs" in data


async def test_health_endpoint(client):
    """Test the health check endpoint."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_openapi_docs_available(client):
    """Test that OpenAPI documentation is available."""
    response = await client.get("/api/v1/openapi.json")
    assert response.status_code == 200

    data = response.json()
    assert "openapi" in data
    assert "/api/v1/time-check" in data["paths"]
    assert "/api/v1/first-card" in data["paths"]
    assert "/api/v1/daily-summary/compute" in data["paths"]


async def test_status_requires_session(client, observer_headers, station):
    assert (await client.get("/api/v1/status")).status_code == 401

    response = await client.get("/api/v1/status", headers=observer_headers)
    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "authenticated": True,
        "role": "observer",
        "station_id": station.id,
    }


async def test_errors_share_one_shape(client, observer_headers):
    response = await client.get("/api/v1/stations/9999", headers=observer_headers)
    assert response.status_code == 403
    assert response.json() == {"detail": "You are not authorized to do this action", "status_code": 403}
