"""
Daily summary service.

Recomputes a station's summary from every observation of a UTC day and
stores it as a new row; reads always return the latest row.
"""

from datetime import date
from typing import Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from obsdesk.core.errors import NotFoundError, ServerError
from obsdesk.crud.daily_summary import daily_summary as summary_crud
from obsdesk.crud.observation import observing_time as observing_time_crud
from obsdesk.models.daily_summary import DailySummary
from obsdesk.models.station import Station
from obsdesk.utils.aggregation import MEASUREMENT_FIELDS, aggregate_daily_summary
from obsdesk.utils.logging_config import get_logger
from obsdesk.utils.synoptic_time import day_utc_range

logger = get_logger(__name__)


async def recompute_daily_summary(
    db: AsyncSession,
    station: Station,
    day: date,
    require_observations: bool = False,
) -> Tuple[DailySummary, Dict]:
    """
    Aggregate a station's day and append the result as the current summary.

    Args:
        db: Database session
        station: Station to summarise
        day: UTC calendar day
        require_observations: Raise NotFoundError instead of storing an
            empty summary when the day has no observing times

    Returns:
        Tuple of (stored DailySummary, aggregate dictionary)

    Raises:
        NotFoundError: If required observations are missing
        ServerError: If the database cannot be read or written
    """
    start, end = day_utc_range(day)
    try:
        observing_times = await observing_time_crud.get_for_day(
            db, station_id=station.id, start=start, end=end
        )
    except SQLAlchemyError as e:
        logger.exception(f"Failed to load observations for station {station.id} on {day}: {e}")
        raise ServerError("Failed to compute daily summary")

    if require_observations and not observing_times:
        raise NotFoundError(f"No observations recorded on {day.isoformat()}")

    aggregate = aggregate_daily_summary(observing_times, day, station.station_code)

    summary = DailySummary(
        station_id=station.id,
        observing_time_id=observing_times[-1].id if observing_times else None,
        date=day,
        data_type=aggregate["data_type"],
        **dict(zip(MEASUREMENT_FIELDS, aggregate["measurements"])),
    )
    try:
        db.add(summary)
        await db.commit()
        await db.refresh(summary)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"Failed to store daily summary for station {station.id} on {day}: {e}")
        raise ServerError("Failed to save daily summary")

    logger.info(f"Daily summary recomputed for station {station.station_code} on {day}")
    return summary, aggregate


async def get_latest_summary(
    db: AsyncSession, day: date, station_id: Optional[int]
) -> DailySummary:
    """
    Current summary for a day.

    Raises:
        NotFoundError: If no summary exists for the day
    """
    summary = await summary_crud.get_latest(db, day=day, station_id=station_id)
    if summary is None:
        raise NotFoundError(f"No daily summary for {day.isoformat()}")
    return summary


async def list_summaries(
    db: AsyncSession, start_date: date, end_date: date, station_id: Optional[int]
) -> List[DailySummary]:
    """Current summary of every (station, date) in a range, newest first."""
    return await summary_crud.get_latest_in_range(
        db, start_date=start_date, end_date=end_date, station_id=station_id
    )
