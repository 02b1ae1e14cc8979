"""
Tests for the form draft endpoints.
"""

from unittest.mock import MagicMock

from redis.exceptions import ConnectionError as RedisConnectionError

from obsdesk.main import app
from obsdesk.services.draft_store import FormDraftStore, RedisDraftBackend


async def test_draft_lifecycle(client, observer_headers):
    url = "/api/v1/drafts/first-card"

    empty = await client.get(url, headers=observer_headers)
    assert empty.status_code == 200
    assert empty.json() == {"form": "first-card", "data": {}, "last_updated": None}

    merged = await client.patch(url, json={"data": {"dry_bulb_as_read": "25.1"}}, headers=observer_headers)
    merged = await client.patch(url, json={"data": {"wet_bulb_as_read": "22.0"}}, headers=observer_headers)
    assert merged.json()["data"] == {"dry_bulb_as_read": "25.1", "wet_bulb_as_read": "22.0"}
    assert merged.json()["last_updated"] is not None

    replaced = await client.put(url, json={"data": {"bar_as_read": "1010"}}, headers=observer_headers)
    assert replaced.json()["data"] == {"bar_as_read": "1010"}

    reset = await client.delete(url, headers=observer_headers)
    assert reset.json()["data"] == {}
    assert (await client.get(url, headers=observer_headers)).json()["data"] == {}


async def test_drafts_are_per_user(client, observer_headers, other_observer_headers):
    url = "/api/v1/drafts/second-card"
    await client.put(url, json={"data": {"wind_speed": "10"}}, headers=observer_headers)

    response = await client.get(url, headers=other_observer_headers)
    assert response.json()["data"] == {}


async def test_invalid_form_name(client, observer_headers):
    response = await client.get("/api/v1/drafts/First%20Card", headers=observer_headers)
    assert response.status_code == 422


async def test_drafts_require_session(client):
    response = await client.get("/api/v1/drafts/first-card")
    assert response.status_code == 401


async def test_draft_storage_outage_returns_error_body(client, observer_headers):
    failing = MagicMock()
    failing.get.side_effect = RedisConnectionError("redis went away")
    app.state.draft_store = FormDraftStore(backend=RedisDraftBackend(client=failing), expiry_hours=24)

    response = await client.get("/api/v1/drafts/first-card", headers=observer_headers)

    assert response.status_code == 500
    assert response.json() == {"detail": "Draft storage is unavailable", "status_code": 500}
