"""
Tests for synoptic code generation and the synoptic code endpoints.
"""

from datetime import datetime, timezone
from types import SimpleNamespace

from sqlalchemy import select

from obsdesk.models.audit_log import AuditLog
from obsdesk.utils.synoptic_code import (
    GROUP_COUNT,
    extreme_temperature_group,
    generate_synoptic_code,
    pressure_change_group,
    pressure_digits,
    rain_duration_code,
    sign_and_tenths,
    significant_cloud_groups,
    visibility_digits,
    wind_group,
)

REPORT_TIME = datetime(2025, 5, 19, 6, 0, tzinfo=timezone.utc)

FIRST_CARD = {
    "hour": "06",
    "station_level_pressure": "1009.6",
    "corrected_sea_level_pressure": "1011.2",
    "dry_bulb_as_read": "27.4",
    "dew_point_temperature": "23",
    "relative_humidity": "82",
    "horizontal_visibility": "8",
    "present_weather_ww": "02",
}

SECOND_CARD = {
    "hour": "06",
    "observer_initial": "MK",
    "clouds": {"low": {"form": "6", "height": "600", "amount": "3", "direction": "SW"}},
    "total_cloud_amount": "5",
    "wind": {"speed": 12, "direction": "SW"},
}


def at(hour, minute=0):
    return datetime(2025, 5, 19, hour, minute, tzinfo=timezone.utc)


def test_wind_group():
    assert wind_group("5", "SW", 12) == "52312"
    assert wind_group("5", "225", "12") == "52312"
    assert wind_group("1", 356, 10) == "13610"


def test_calm_wind_has_no_direction():
    assert wind_group("3", "270", 0) == "30000"
    assert wind_group("3", "270", None) == "30000"


def test_wind_of_100_knots_and_above():
    assert wind_group("8", 90, 105) == "85905"


def test_temperature_sign_and_tenths():
    assert sign_and_tenths("27.4") == "0274"
    assert sign_and_tenths(-2.5) == "1025"
    assert sign_and_tenths(None) == "0000"


def test_pressure_and_visibility_digits():
    assert pressure_digits("1009.6") == "0096"
    assert pressure_digits("1011.2") == "0112"
    assert pressure_digits(None) == "0000"
    assert visibility_digits("8") == "80"
    assert visibility_digits("") == "00"


def test_continuous_rain_duration_codes():
    assert rain_duration_code(REPORT_TIME, at(4, 10), at(5), False, 3.5) == "4"
    assert rain_duration_code(REPORT_TIME, at(1), at(2), False, 3.5) == "5"
    assert rain_duration_code(REPORT_TIME, at(1), at(5), False, 3.5) == "7"
    # Started before the six hour window
    day_before = datetime(2025, 5, 18, 23, 0, tzinfo=timezone.utc)
    assert rain_duration_code(REPORT_TIME, day_before, at(5), False, 3.5) == "/"


def test_intermittent_rain_duration_codes():
    assert rain_duration_code(REPORT_TIME, at(0, 30), at(2, 30), True, 1.0) == "1"
    assert rain_duration_code(REPORT_TIME, at(3, 30), at(5), True, 1.0) == "2"
    assert rain_duration_code(REPORT_TIME, at(0), at(6), True, 1.0) == "3"


def test_rain_without_times():
    assert rain_duration_code(REPORT_TIME, None, None, None, 2.0) == "0"
    assert rain_duration_code(REPORT_TIME, None, None, None, 0.0) == "/"


def test_extreme_temperature_depends_on_hour():
    assert extreme_temperature_group("00", "21.5") == "20215"
    assert extreme_temperature_group("12", "31.0") == "10310"
    assert extreme_temperature_group("06", "31.0") == ""


def test_pressure_change_group():
    assert pressure_change_group("0.8") == "58008"
    assert pressure_change_group(-1.2) == "59012"
    assert pressure_change_group(None) == "58000"


def test_significant_cloud_segments():
    second = SimpleNamespace(
        layer1_amount="3", layer1_form="6", layer1_height="15",
        layer2_amount="5", layer2_form="8", layer2_height="30",
    )
    assert significant_cloud_groups(second) == "83615 / 58830"
    assert significant_cloud_groups(SimpleNamespace()) == ""


def test_generated_report():
    first = SimpleNamespace(
        horizontal_visibility="8",
        dry_bulb_as_read="27.4",
        dew_point_temperature="23",
        station_level_pressure="1009.6",
        corrected_sea_level_pressure="1011.2",
        present_weather_ww="02",
        max_min_temp_as_read="31.0",
        relative_humidity="82",
    )
    second = SimpleNamespace(
        observer_initial="MK",
        total_cloud_amount="5",
        low_cloud_height="6",
        wind_speed="12",
        wind_direction="SW",
        rainfall_during_previous="3.5",
        rainfall_time_start=at(4, 10),
        rainfall_time_end=at(5),
        is_intermittent_rain=False,
    )

    report = generate_synoptic_code("41923", REPORT_TIME, first, second)

    groups = report["measurements"]
    assert len(groups) == GROUP_COUNT
    assert report["data_type"] == "SYNOP"
    assert (report["year"], report["month"], report["day"]) == ("2025", "05", "19")
    assert report["weather_remark"] == "MK"
    assert groups[:9] == [
        "1", "41923", "32680", "52312", "10274", "20230", "30096/40112", "60044", "70200",
    ]
    assert groups[10] == ""
    assert groups[13:18] == ["5", "2", "06", "58000", "60044"]
    assert groups[19] == "900"
    assert groups[20] == "91082"


async def file_cards(client, headers):
    assert (await client.post("/api/v1/first-card", json=FIRST_CARD, headers=headers)).status_code == 201
    assert (await client.post("/api/v1/second-card", json=SECOND_CARD, headers=headers)).status_code == 201


async def test_generate_from_todays_slot(client, observer_headers):
    await file_cards(client, observer_headers)

    response = await client.get("/api/v1/synoptic-code/generate", headers=observer_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["station_no"] == "41923"
    assert body["utc_time"].startswith(datetime.now(timezone.utc).date().isoformat())
    assert body["measurements"][3] == "52312"
    assert body["measurements"][4] == "10274"
    assert body["measurements"][15] == "06"
    assert body["weather_remark"] == "MK"


async def test_generate_needs_a_closed_slot(client, observer_headers):
    response = await client.get("/api/v1/synoptic-code/generate", headers=observer_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "No observing time for today"

    await client.post("/api/v1/first-card", json=FIRST_CARD, headers=observer_headers)
    response = await client.get(
        "/api/v1/synoptic-code/generate", params={"hour": "06"}, headers=observer_headers
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "First or second card data not found"


async def test_generate_requires_a_station(client, super_admin_headers):
    response = await client.get("/api/v1/synoptic-code/generate", headers=super_admin_headers)
    assert response.status_code == 403


async def test_save_correct_and_list(client, db, observer_headers):
    await file_cards(client, observer_headers)
    corrections = [None] * GROUP_COUNT
    corrections[20] = "91090"

    created = await client.post(
        "/api/v1/synoptic-code", json={"hour": "06", "measurements": corrections}, headers=observer_headers
    )
    assert created.status_code == 201
    code = created.json()
    assert code["data_type"] == "SYNOP"
    assert code["measurements"][3] == "52312"
    assert code["measurements"][20] == "91090"

    duplicate = await client.post("/api/v1/synoptic-code", json={"hour": "06"}, headers=observer_headers)
    assert duplicate.status_code == 409

    fixes = [None] * GROUP_COUNT
    fixes[19] = "90615"
    updated = await client.put(
        f"/api/v1/synoptic-code/{code['id']}",
        json={"measurements": fixes, "weather_remark": "MK/AB"},
        headers=observer_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["measurements"][19] == "90615"
    assert updated.json()["measurements"][20] == "91090"
    assert updated.json()["weather_remark"] == "MK/AB"

    listed = await client.get("/api/v1/synoptic-code", headers=observer_headers)
    assert [row["id"] for row in listed.json()] == [code["id"]]

    result = await db.execute(select(AuditLog.action).where(AuditLog.module == "SYNOPTIC_CODE").order_by(AuditLog.id))
    assert result.scalars().all() == ["CREATE", "UPDATE"]


async def test_wrong_number_of_groups_is_rejected(client, observer_headers):
    await file_cards(client, observer_headers)

    response = await client.post(
        "/api/v1/synoptic-code", json={"hour": "06", "measurements": ["1"] * 5}, headers=observer_headers
    )
    assert response.status_code == 422


async def test_stored_codes_are_scoped(client, observer_headers, other_observer_headers, super_admin_headers):
    await file_cards(client, observer_headers)
    created = await client.post("/api/v1/synoptic-code", json={}, headers=observer_headers)
    assert created.status_code == 201

    assert (await client.get("/api/v1/synoptic-code", headers=other_observer_headers)).json() == []
    assert len((await client.get("/api/v1/synoptic-code", headers=super_admin_headers)).json()) == 1

    response = await client.put(
        f"/api/v1/synoptic-code/{created.json()['id']}",
        json={"weather_remark": "XX"},
        headers=other_observer_headers,
    )
    assert response.status_code == 403


async def test_correcting_missing_code(client, observer_headers):
    response = await client.put("/api/v1/synoptic-code/999", json={"weather_remark": "XX"}, headers=observer_headers)
    assert response.status_code == 404
