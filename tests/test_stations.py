"""
Tests for station endpoints.
"""

NEW_STATION = {
    "name": "Rajshahi",
    "station_code": "41895",
    "security_code": "RAJ-0001",
    "latitude": 24.3667,
    "longitude": 88.7,
}


async def test_locations_are_public(client, station, other_station):
    response = await client.get("/api/v1/stations/locations")

    assert response.status_code == 200
    names = [row["name"] for row in response.json()]
    assert names == ["Dhaka", "Sylhet"]
    assert "security_code" not in response.json()[0]


async def test_observer_sees_only_own_station(client, observer_headers, station, other_station):
    response = await client.get("/api/v1/stations", headers=observer_headers)

    assert response.status_code == 200
    assert [row["id"] for row in response.json()] == [station.id]

    assert (await client.get(f"/api/v1/stations/{station.id}", headers=observer_headers)).status_code == 200
    assert (await client.get(f"/api/v1/stations/{other_station.id}", headers=observer_headers)).status_code == 403


async def test_super_admin_sees_every_station(client, super_admin_headers, station, other_station):
    response = await client.get("/api/v1/stations", headers=super_admin_headers)
    assert len(response.json()) == 2

    response = await client.get(
        "/api/v1/stations", params={"station_id": other_station.id}, headers=super_admin_headers
    )
    assert [row["station_code"] for row in response.json()] == ["41891"]


async def test_super_admin_manages_stations(client, super_admin_headers):
    created = await client.post("/api/v1/stations", json=NEW_STATION, headers=super_admin_headers)
    assert created.status_code == 201
    station_id = created.json()["id"]
    assert "security_code" not in created.json()

    duplicate = await client.post("/api/v1/stations", json=NEW_STATION, headers=super_admin_headers)
    assert duplicate.status_code == 409

    updated = await client.put(
        f"/api/v1/stations/{station_id}", json={"name": "Rajshahi Airport"}, headers=super_admin_headers
    )
    assert updated.status_code == 200
    assert updated.json()["name"] == "Rajshahi Airport"
    assert updated.json()["station_code"] == "41895"

    deleted = await client.delete(f"/api/v1/stations/{station_id}", headers=super_admin_headers)
    assert deleted.status_code == 204

    missing = await client.get(f"/api/v1/stations/{station_id}", headers=super_admin_headers)
    assert missing.status_code == 404


async def test_update_to_taken_code_conflicts(client, super_admin_headers, station, other_station):
    response = await client.put(
        f"/api/v1/stations/{station.id}",
        json={"station_code": other_station.station_code},
        headers=super_admin_headers,
    )
    assert response.status_code == 409


async def test_station_admin_cannot_create_stations(client, station_admin_headers):
    response = await client.post("/api/v1/stations", json=NEW_STATION, headers=station_admin_headers)
    assert response.status_code == 403


async def test_invalid_coordinates_are_rejected(client, super_admin_headers):
    response = await client.post(
        "/api/v1/stations", json={**NEW_STATION, "latitude": 123}, headers=super_admin_headers
    )
    assert response.status_code == 422
