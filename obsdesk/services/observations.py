"""
First- and second-card submission.

A first card creates the observation slot (ObservingTime) together with its
meteorological entry. A second card closes the slot and triggers a
recompute of the station's daily summary. Two concurrent first cards for
the same slot race on the (station_id, utc_time) unique constraint; the
loser gets a ConflictError.
"""

from datetime import datetime, timezone
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from obsdesk.core.errors import ConflictError, InvalidInputError, NotFoundError, ServerError
from obsdesk.crud.observation import observing_time as observing_time_crud
from obsdesk.crud.station import station as station_crud
from obsdesk.models.daily_summary import DailySummary
from obsdesk.models.meteorological_entry import MeteorologicalEntry
from obsdesk.models.observing_time import ObservingTime
from obsdesk.models.station import Station
from obsdesk.models.weather_observation import WeatherObservation
from obsdesk.schemas.observations import FirstCardCreate, SecondCardCreate
from obsdesk.services.audit import LogAction, LogModule, log_action
from obsdesk.services.daily_summary import recompute_daily_summary
from obsdesk.utils.logging_config import get_logger
from obsdesk.utils.synoptic_time import parse_synoptic_hour, utc_to_local

logger = get_logger(__name__)


def combine_date_time(date_str: Optional[str], time_str: Optional[str]) -> Optional[datetime]:
    """
    Combine "YYYY-MM-DD" and "HH:MM" into a UTC datetime.

    Returns None when either part is missing or malformed.

    Example:
        >>> combine_date_time("2025-05-19", "23:30")
        datetime(2025, 5, 19, 23, 30, tzinfo=timezone.utc)
    """
    if not date_str or not time_str:
        return None
    try:
        return datetime.strptime(f"{date_str.strip()} {time_str.strip()}", "%Y-%m-%d %H:%M").replace(
            tzinfo=timezone.utc
        )
    except ValueError:
        return None


async def _get_station(db: AsyncSession, station_id: int) -> Station:
    station = await station_crud.get(db, station_id)
    if station is None:
        raise NotFoundError(f"No station found with ID: {station_id}")
    return station


async def submit_first_stage(
    db: AsyncSession,
    session,
    station_id: int,
    payload: FirstCardCreate,
    now: Optional[datetime] = None,
) -> Tuple[ObservingTime, MeteorologicalEntry]:
    """
    Open an observation slot with its first card.

    Args:
        db: Database session
        session: CurrentSession of the observer
        station_id: Observer's station
        payload: First-card readings and the synoptic hour
        now: Current time, for tests

    Returns:
        Tuple of (new ObservingTime, new MeteorologicalEntry)

    Raises:
        InvalidInputError: If the hour is not a synoptic hour code
        NotFoundError: If the station does not exist
        ConflictError: If the slot already exists
        ServerError: If the database write fails
    """
    utc_time = parse_synoptic_hour(payload.hour, now=now)
    await _get_station(db, station_id)

    if await observing_time_crud.get_slot(db, station_id=station_id, utc_time=utc_time):
        raise ConflictError("Observing time already exists")

    entry = MeteorologicalEntry(**payload.entry_fields())
    slot = ObservingTime(
        station_id=station_id,
        user_id=session.user_id,
        utc_time=utc_time,
        local_time=utc_to_local(utc_time),
        meteorological_entries=[entry],
    )
    try:
        db.add(slot)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning(f"Concurrent first card for station {station_id} at {utc_time.isoformat()}")
        raise ConflictError("Observing time already exists")
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"Failed to save first card for station {station_id}: {e}")
        raise ServerError("Failed to save first card")

    logger.info(f"First card saved: station={station_id} utc={utc_time.isoformat()} user={session.user_id}")
    await log_action(
        db,
        session,
        LogAction.CREATE,
        LogModule.METEOROLOGICAL_ENTRY,
        f"First card submitted for {payload.hour} UTC",
        target_id=entry.id,
        details={"observing_time_id": slot.id, "hour": payload.hour},
    )
    return slot, entry


def _weather_observation_fields(payload: SecondCardCreate) -> dict:
    fields = {
        "observer_initial": payload.observer_initial,
        "card_indicator": "2",
        "total_cloud_amount": payload.total_cloud_amount,
        "rainfall_time_start": combine_date_time(payload.rainfall.date_start, payload.rainfall.time_start),
        "rainfall_time_end": combine_date_time(payload.rainfall.date_end, payload.rainfall.time_end),
        "rainfall_since_previous": payload.rainfall.since_previous,
        "rainfall_during_previous": payload.rainfall.during_previous,
        "rainfall_last_24_hours": payload.rainfall.last_24_hours,
        "is_intermittent_rain": payload.rainfall.is_intermittent_rain,
        "wind_first_anemometer": payload.wind.first_anemometer,
        "wind_second_anemometer": payload.wind.second_anemometer,
        "wind_speed": payload.wind.speed,
        "wind_direction": payload.wind.direction,
    }
    for level in ("low", "medium", "high"):
        cloud = getattr(payload.clouds, level)
        for attr in ("form", "height", "amount", "direction"):
            fields[f"{level}_cloud_{attr}"] = getattr(cloud, attr)
    for index, layer in enumerate(payload.significant_clouds, start=1):
        for attr in ("form", "height", "amount"):
            fields[f"layer{index}_{attr}"] = getattr(layer, attr)
    return fields


async def submit_second_stage(
    db: AsyncSession,
    session,
    station_id: int,
    payload: SecondCardCreate,
    now: Optional[datetime] = None,
) -> Tuple[ObservingTime, WeatherObservation, Optional[DailySummary]]:
    """
    Close an observation slot with its second card.

    The station's daily summary for the slot's day is recomputed afterwards.
    A failed recompute is logged and does not undo the saved card; the
    summary is then returned as None.

    Args:
        db: Database session
        session: CurrentSession of the observer
        station_id: Observer's station
        payload: Second-card observation and the synoptic hour
        now: Current time, for tests

    Returns:
        Tuple of (ObservingTime, new WeatherObservation, new DailySummary or None)

    Raises:
        InvalidInputError: If the hour is invalid or no first card exists
        ConflictError: If a second card already exists for the slot
        ServerError: If the database write fails
    """
    utc_time = parse_synoptic_hour(payload.hour, now=now)
    station = await _get_station(db, station_id)

    found = await observing_time_crud.get_slot_with_counts(db, station_id=station_id, utc_time=utc_time)
    if found is None or found[1] == 0:
        raise InvalidInputError("First card entry not found")
    slot, _first_count, second_count = found
    if second_count > 0:
        raise ConflictError("Second card entry already exists")

    observation = WeatherObservation(observing_time_id=slot.id, **_weather_observation_fields(payload))
    try:
        db.add(observation)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"Failed to save second card for station {station_id}: {e}")
        raise ServerError("Failed to save second card")

    logger.info(f"Second card saved: station={station_id} utc={utc_time.isoformat()} user={session.user_id}")
    await log_action(
        db,
        session,
        LogAction.CREATE,
        LogModule.WEATHER_OBSERVATION,
        f"Second card submitted for {payload.hour} UTC",
        target_id=observation.id,
        details={"observing_time_id": slot.id, "hour": payload.hour},
    )

    try:
        summary, _aggregate = await recompute_daily_summary(db, station, utc_time.date())
    except ServerError:
        # The card is saved; the summary catches up on the next recompute
        logger.error(f"Daily summary left stale for station {station_id} on {utc_time.date().isoformat()}")
        await db.refresh(slot)
        await db.refresh(observation)
        return slot, observation, None

    await log_action(
        db,
        session,
        LogAction.CREATE,
        LogModule.DAILY_SUMMARY,
        f"Daily summary recomputed for {utc_time.date().isoformat()}",
        target_id=summary.id,
    )
    return slot, observation, summary
