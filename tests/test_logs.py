"""
Tests for the audit log endpoint.
"""

from test_observations import FIRST_CARD


async def test_super_admin_sees_every_entry(client, super_admin_headers, observer_headers, other_observer_headers):
    await client.post("/api/v1/first-card", json=FIRST_CARD, headers=observer_headers)
    await client.post("/api/v1/first-card", json=FIRST_CARD, headers=other_observer_headers)

    response = await client.get("/api/v1/logs", headers=super_admin_headers)

    assert response.status_code == 200
    page = response.json()
    assert page["total"] == 2
    assert page["items"][0]["module"] == "METEOROLOGICAL_ENTRY"
    assert page["items"][0]["action"] == "CREATE"


async def test_station_users_see_their_station_observers(
    client, station_admin_headers, observer_headers, other_observer_headers, super_admin_headers
):
    await client.post("/api/v1/first-card", json=FIRST_CARD, headers=observer_headers)
    await client.post("/api/v1/first-card", json=FIRST_CARD, headers=other_observer_headers)
    await client.post(
        "/api/v1/stations",
        json={"name": "Khulna", "station_code": "41947", "security_code": "KHL", "latitude": 22.78, "longitude": 89.53},
        headers=super_admin_headers,
    )

    response = await client.get("/api/v1/logs", headers=station_admin_headers)

    page = response.json()
    assert page["total"] == 1
    assert page["items"][0]["actor_email"] == "observer@obsdesk.org"


async def test_pagination(client, super_admin_headers, observer_headers):
    for hour in ("00", "03", "06"):
        await client.post("/api/v1/first-card", json={**FIRST_CARD, "hour": hour}, headers=observer_headers)

    response = await client.get("/api/v1/logs", params={"page": 2, "per_page": 2}, headers=super_admin_headers)

    page = response.json()
    assert page["total"] == 3
    assert page["page"] == 2
    assert page["total_pages"] == 2
    assert len(page["items"]) == 1
