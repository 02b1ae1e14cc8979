"""
Tests for observation slot eligibility.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from obsdesk.core.errors import InvalidInputError, ServerError
from obsdesk.models.meteorological_entry import MeteorologicalEntry
from obsdesk.models.observing_time import ObservingTime
from obsdesk.models.weather_observation import WeatherObservation
from obsdesk.services.slot_checker import (
    MESSAGE_CLOSED,
    MESSAGE_OPEN,
    MESSAGE_SECOND_PENDING,
    check_slot,
    decide_slot,
)

NOW = datetime(2025, 5, 19, 14, 0, tzinfo=timezone.utc)
TODAY_NOON = datetime(2025, 5, 19, 12, 0, tzinfo=timezone.utc)
YESTERDAY_NOON = datetime(2025, 5, 18, 12, 0, tzinfo=timezone.utc)


async def add_slot(db, station, utc_time, first_stage=(), second_stage=()):
    slot = ObservingTime(
        station_id=station.id,
        utc_time=utc_time,
        local_time=utc_time,
        meteorological_entries=list(first_stage),
        weather_observations=list(second_stage),
    )
    db.add(slot)
    await db.commit()
    return slot


def test_decision_table():
    assert decide_slot(False, 0) == (True, False, MESSAGE_OPEN)
    assert decide_slot(True, 0) == (False, True, MESSAGE_SECOND_PENDING)
    assert decide_slot(True, 1) == (False, False, MESSAGE_CLOSED)
    assert decide_slot(True, 3) == (False, False, MESSAGE_CLOSED)


async def test_empty_slot_allows_first_card(db, station):
    decision = await check_slot(db, "12", station.id, now=NOW)

    assert decision.allow_first_card is True
    assert decision.allow_second_card is False
    assert decision.message == MESSAGE_OPEN
    assert decision.time is None
    assert decision.yesterday_first_stage_entries == []


async def test_slot_with_first_card_allows_second(db, station):
    await add_slot(db, station, TODAY_NOON, first_stage=[MeteorologicalEntry(dry_bulb_as_read="25")])

    decision = await check_slot(db, "12", station.id, now=NOW)

    assert decision.allow_first_card is False
    assert decision.allow_second_card is True
    assert decision.message == MESSAGE_SECOND_PENDING
    assert decision.time == TODAY_NOON


async def test_complete_slot_allows_nothing(db, station):
    await add_slot(
        db,
        station,
        TODAY_NOON,
        first_stage=[MeteorologicalEntry(dry_bulb_as_read="25")],
        second_stage=[WeatherObservation(wind_speed="10")],
    )

    decision = await check_slot(db, "12", station.id, now=NOW)

    assert decision.allow_first_card is False
    assert decision.allow_second_card is False
    assert decision.message == MESSAGE_CLOSED


async def test_other_station_slots_are_ignored(db, station, other_station):
    await add_slot(db, other_station, TODAY_NOON, first_stage=[MeteorologicalEntry()])

    decision = await check_slot(db, "12", station.id, now=NOW)

    assert decision.allow_first_card is True


async def test_yesterday_first_card_is_returned(db, station):
    await add_slot(
        db, station, YESTERDAY_NOON,
        first_stage=[MeteorologicalEntry(station_level_pressure="1009.4")],
    )

    decision = await check_slot(db, "12", station.id, now=NOW)

    assert decision.allow_first_card is True
    assert len(decision.yesterday_first_stage_entries) == 1
    assert decision.yesterday_first_stage_entries[0].station_level_pressure == "1009.4"


async def test_invalid_hour_is_rejected_before_any_read(station):
    db = AsyncMock()

    with pytest.raises(InvalidInputError):
        await check_slot(db, "13", station.id, now=NOW)

    db.execute.assert_not_called()


async def test_storage_failure_becomes_server_error():
    db = AsyncMock()
    db.execute.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))

    with pytest.raises(ServerError) as exc_info:
        await check_slot(db, "12", 1, now=NOW)

    assert exc_info.value.message == "Failed to check time"
    assert "locked" not in exc_info.value.message
