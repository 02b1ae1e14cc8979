"""
Tests for the first-card / second-card workflow.
"""

from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from obsdesk.core.errors import ConflictError, InvalidInputError, ServerError
from obsdesk.dependencies.auth import CurrentSession
from obsdesk.models.audit_log import AuditLog
from obsdesk.models.daily_summary import DailySummary
from obsdesk.schemas.observations import FirstCardCreate, SecondCardCreate
from obsdesk.services import observations as observations_service
from obsdesk.services.observations import combine_date_time, submit_first_stage, submit_second_stage

FIRST_CARD = {
    "hour": "06",
    "station_level_pressure": "1009.6",
    "corrected_sea_level_pressure": 1011.2,
    "dry_bulb_as_read": "27.4",
    "wet_bulb_as_read": "24.1",
    "max_min_temp_as_read": "31.0",
    "dew_point_temperature": "23",
    "relative_humidity": "82",
    "horizontal_visibility": "8",
    "present_weather_ww": "02",
}

SECOND_CARD = {
    "hour": "06",
    "observer_initial": "MK",
    "clouds": {"low": {"form": "Cu", "height": "600", "amount": "3", "direction": "SW"}},
    "total_cloud_amount": "5",
    "significant_clouds": [{"form": "Cu", "height": "600", "amount": "3"}],
    "rainfall": {
        "date_start": "2025-05-19",
        "time_start": "04:10",
        "date_end": "2025-05-19",
        "time_end": "05:00",
        "last_24_hours": "3.5",
        "is_intermittent_rain": False,
    },
    "wind": {"speed": 12, "direction": "SW"},
}


async def time_check(client, headers, hour="06"):
    response = await client.post("/api/v1/time-check", json={"hour": hour}, headers=headers)
    assert response.status_code == 200
    return response.json()


async def test_full_observation_cycle(client, observer_headers):
    """Open slot -> first card -> second card -> closed slot."""
    decision = await time_check(client, observer_headers)
    assert decision["allow_first_card"] is True
    assert decision["allow_second_card"] is False
    assert decision["yesterday"] == {"first_stage_entries": []}

    response = await client.post("/api/v1/first-card", json=FIRST_CARD, headers=observer_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "First card saved"
    assert body["utc_time"].startswith(datetime.now(timezone.utc).date().isoformat())

    decision = await time_check(client, observer_headers)
    assert decision["allow_first_card"] is False
    assert decision["allow_second_card"] is True
    assert decision["time"] is not None

    response = await client.post("/api/v1/second-card", json=SECOND_CARD, headers=observer_headers)
    assert response.status_code == 201
    assert response.json()["observing_time_id"] == body["observing_time_id"]

    decision = await time_check(client, observer_headers)
    assert decision["allow_first_card"] is False
    assert decision["allow_second_card"] is False


async def test_duplicate_first_card_conflicts(client, observer_headers):
    first = await client.post("/api/v1/first-card", json=FIRST_CARD, headers=observer_headers)
    second = await client.post("/api/v1/first-card", json=FIRST_CARD, headers=observer_headers)

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["detail"] == "Observing time already exists"


async def test_second_card_requires_first_card(client, observer_headers):
    response = await client.post("/api/v1/second-card", json=SECOND_CARD, headers=observer_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "First card entry not found"


async def test_duplicate_second_card_conflicts(client, observer_headers):
    await client.post("/api/v1/first-card", json=FIRST_CARD, headers=observer_headers)
    await client.post("/api/v1/second-card", json=SECOND_CARD, headers=observer_headers)

    response = await client.post("/api/v1/second-card", json=SECOND_CARD, headers=observer_headers)
    assert response.status_code == 409


async def test_invalid_hour_is_bad_request(client, observer_headers):
    response = await client.post("/api/v1/time-check", json={"hour": "07"}, headers=observer_headers)
    assert response.status_code == 400

    response = await client.post(
        "/api/v1/first-card", json={**FIRST_CARD, "hour": "25"}, headers=observer_headers
    )
    assert response.status_code == 400


async def test_readings_longer_than_their_column_are_rejected(client, observer_headers):
    too_long = {**FIRST_CARD, "station_level_pressure": "1" * 21}
    response = await client.post("/api/v1/first-card", json=too_long, headers=observer_headers)
    assert response.status_code == 422

    wide_code = {**FIRST_CARD, "present_weather_ww": "12345678901"}
    response = await client.post("/api/v1/first-card", json=wide_code, headers=observer_headers)
    assert response.status_code == 422

    response = await client.post(
        "/api/v1/second-card",
        json={**SECOND_CARD, "wind": {"speed": "9" * 21, "direction": "SW"}},
        headers=observer_headers,
    )
    assert response.status_code == 422

    response = await client.post(
        "/api/v1/first-card", json={**FIRST_CARD, "misc_meteors": "haze " * 10}, headers=observer_headers
    )
    assert response.status_code == 201


async def test_super_admin_cannot_submit_cards(client, super_admin_headers):
    response = await client.post("/api/v1/first-card", json=FIRST_CARD, headers=super_admin_headers)
    assert response.status_code == 403


async def test_unauthenticated_submission_is_rejected(client):
    response = await client.post("/api/v1/first-card", json=FIRST_CARD)
    assert response.status_code == 401


async def test_list_first_cards_is_scoped(client, observer_headers, other_observer_headers, super_admin_headers):
    await client.post("/api/v1/first-card", json=FIRST_CARD, headers=observer_headers)
    await client.post("/api/v1/first-card", json={**FIRST_CARD, "hour": "09"}, headers=other_observer_headers)

    own = await client.get("/api/v1/first-card", headers=observer_headers)
    assert own.status_code == 200
    rows = own.json()
    assert len(rows) == 1
    assert rows[0]["meteorological_entries"][0]["dry_bulb_as_read"] == "27.4"
    # Numbers posted by the form are stored as text
    assert rows[0]["meteorological_entries"][0]["corrected_sea_level_pressure"] == "1011.2"

    everything = await client.get("/api/v1/first-card", headers=super_admin_headers)
    assert len(everything.json()) == 2


async def test_list_first_cards_rejects_long_ranges(client, observer_headers):
    response = await client.get(
        "/api/v1/first-card",
        params={"start_date": "2025-01-01", "end_date": "2025-03-01"},
        headers=observer_headers,
    )
    assert response.status_code == 400


async def test_list_second_cards_returns_todays_closed_slots(client, observer_headers):
    await client.post("/api/v1/first-card", json=FIRST_CARD, headers=observer_headers)
    await client.post("/api/v1/first-card", json={**FIRST_CARD, "hour": "09"}, headers=observer_headers)
    await client.post("/api/v1/second-card", json=SECOND_CARD, headers=observer_headers)

    response = await client.get("/api/v1/second-card", headers=observer_headers)

    assert response.status_code == 200
    rows = response.json()
    assert len(rows) == 1
    observation = rows[0]["weather_observations"][0]
    assert observation["wind_speed"] == "12"
    assert observation["low_cloud_form"] == "Cu"
    assert observation["layer1_height"] == "600"
    assert observation["rainfall_time_start"].startswith("2025-05-19T04:10")


async def test_today_slots(client, observer_headers):
    await client.post("/api/v1/first-card", json=FIRST_CARD, headers=observer_headers)
    await client.post("/api/v1/first-card", json={**FIRST_CARD, "hour": "00"}, headers=observer_headers)
    await client.post("/api/v1/second-card", json=SECOND_CARD, headers=observer_headers)

    response = await client.get("/api/v1/time-check/today", headers=observer_headers)

    assert response.status_code == 200
    slots = response.json()
    assert [slot["hour"] for slot in slots] == ["00", "06"]
    assert slots[0]["has_second_stage_entry"] is False
    assert slots[1]["has_first_stage_entry"] is True
    assert slots[1]["has_second_stage_entry"] is True
    assert slots[1]["has_daily_summary"] is True


async def test_yesterday_entries_prefill_time_check(client, db, observer_headers, observer, station):
    yesterday = await submit_first_stage(
        db,
        CurrentSession(observer.id, observer.email, observer.name, observer.role, station.id, "t"),
        station.id,
        FirstCardCreate(hour="06", dry_bulb_as_read="26.0"),
        now=datetime.now(timezone.utc) - timedelta(days=1),
    )
    assert yesterday[0].id

    decision = await time_check(client, observer_headers)
    entries = decision["yesterday"]["first_stage_entries"]
    assert len(entries) == 1
    assert entries[0]["dry_bulb_as_read"] == "26.0"


async def test_submissions_are_audited(client, db, observer_headers):
    await client.post("/api/v1/first-card", json=FIRST_CARD, headers=observer_headers)
    await client.post("/api/v1/second-card", json=SECOND_CARD, headers=observer_headers)

    result = await db.execute(select(AuditLog.module).order_by(AuditLog.id))
    assert result.scalars().all() == ["METEOROLOGICAL_ENTRY", "WEATHER_OBSERVATION", "DAILY_SUMMARY"]


async def test_service_level_flow_with_fixed_clock(db, observer, station):
    session = CurrentSession(observer.id, observer.email, observer.name, observer.role, station.id, "t")
    now = datetime(2025, 5, 19, 13, 0, tzinfo=timezone.utc)

    slot, entry = await submit_first_stage(
        db, session, station.id, FirstCardCreate(hour="12", station_level_pressure="1011.0"), now=now
    )
    assert entry.observing_time_id == slot.id

    with pytest.raises(ConflictError):
        await submit_first_stage(db, session, station.id, FirstCardCreate(hour="12"), now=now)

    with pytest.raises(InvalidInputError):
        await submit_second_stage(db, session, station.id, SecondCardCreate(hour="15"), now=now)

    _slot, observation, summary = await submit_second_stage(
        db, session, station.id, SecondCardCreate(hour="12", wind={"speed": "7", "direction": "N"}), now=now
    )
    assert observation.wind_speed == "7"
    assert summary.date == date(2025, 5, 19)
    assert summary.av_station_pressure == "1011"
    assert summary.wind_direction_code == "N"
    assert summary.observing_time_id == slot.id

    count = await db.execute(select(func.count()).select_from(DailySummary))
    assert count.scalar_one() == 1


def test_combine_date_time():
    assert combine_date_time("2025-05-19", "23:30") == datetime(2025, 5, 19, 23, 30, tzinfo=timezone.utc)
    assert combine_date_time("2025-05-19", None) is None
    assert combine_date_time("2025-05-19", "25:00") is None
    assert combine_date_time("", "10:00") is None


async def test_failed_audit_write_keeps_the_saved_card(db, observer, station):
    # An actor without an email cannot be written to the audit log
    session = CurrentSession(observer.id, None, observer.name, observer.role, station.id, "t")
    now = datetime(2025, 5, 19, 13, 0, tzinfo=timezone.utc)

    slot, entry = await submit_first_stage(db, session, station.id, FirstCardCreate(hour="12"), now=now)

    assert slot.id is not None
    assert slot.utc_time == datetime(2025, 5, 19, 12, 0, tzinfo=timezone.utc)
    assert entry.observing_time_id == slot.id
    count = await db.execute(select(func.count()).select_from(AuditLog))
    assert count.scalar_one() == 0


async def test_summary_failure_does_not_fail_second_card(client, db, observer_headers, monkeypatch):
    async def broken_recompute(*args, **kwargs):
        raise ServerError("Failed to save daily summary")

    monkeypatch.setattr(observations_service, "recompute_daily_summary", broken_recompute)
    await client.post("/api/v1/first-card", json=FIRST_CARD, headers=observer_headers)

    response = await client.post("/api/v1/second-card", json=SECOND_CARD, headers=observer_headers)

    assert response.status_code == 201
    assert response.json()["entry_id"]
    count = await db.execute(select(func.count()).select_from(DailySummary))
    assert count.scalar_one() == 0
