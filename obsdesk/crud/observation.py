"""
Observation slot CRUD operations.

Queries over observing times and their first- and second-card entries.
Entries are always eager loaded; async sessions cannot lazy load.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import and_, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from obsdesk.crud.base import CRUDBase
from obsdesk.models.daily_summary import DailySummary
from obsdesk.models.meteorological_entry import MeteorologicalEntry
from obsdesk.models.observing_time import ObservingTime
from obsdesk.models.weather_observation import WeatherObservation


class CRUDObservingTime(CRUDBase[ObservingTime, ObservingTime, dict]):
    """
    CRUD operations for ObservingTime model.
    """

    async def get_slot(
        self, db: AsyncSession, *, station_id: int, utc_time: datetime
    ) -> Optional[ObservingTime]:
        """
        Get the observing time of a station at one UTC timestamp.

        Args:
            db: Database session
            station_id: Station ID
            utc_time: Synoptic hour in UTC

        Returns:
            ObservingTime instance or None if not found
        """
        result = await db.execute(
            select(ObservingTime).where(
                and_(
                    ObservingTime.station_id == station_id,
                    ObservingTime.utc_time == utc_time
                )
            )
        )
        return result.scalars().first()

    async def get_slot_with_counts(
        self, db: AsyncSession, *, station_id: int, utc_time: datetime
    ) -> Optional[Tuple[ObservingTime, int, int]]:
        """
        Get an observing time with the number of attached entries.

        Returns:
            Tuple of (observing time, first-card count, second-card count),
            or None if the slot does not exist
        """
        first_count = (
            select(func.count(MeteorologicalEntry.id))
            .where(MeteorologicalEntry.observing_time_id == ObservingTime.id)
            .correlate(ObservingTime)
            .scalar_subquery()
        )
        second_count = (
            select(func.count(WeatherObservation.id))
            .where(WeatherObservation.observing_time_id == ObservingTime.id)
            .correlate(ObservingTime)
            .scalar_subquery()
        )
        result = await db.execute(
            select(ObservingTime, first_count, second_count).where(
                and_(
                    ObservingTime.station_id == station_id,
                    ObservingTime.utc_time == utc_time
                )
            )
        )
        row = result.first()
        if row is None:
            return None
        return row[0], row[1], row[2]

    async def get_slot_with_first_stage(
        self, db: AsyncSession, *, station_id: int, utc_time: datetime
    ) -> Optional[ObservingTime]:
        """Get an observing time with its first-card entries loaded."""
        result = await db.execute(
            select(ObservingTime)
            .options(selectinload(ObservingTime.meteorological_entries))
            .execution_options(populate_existing=True)
            .where(
                and_(
                    ObservingTime.station_id == station_id,
                    ObservingTime.utc_time == utc_time
                )
            )
        )
        return result.scalars().first()

    async def get_in_range(
        self,
        db: AsyncSession,
        *,
        start: datetime,
        end: datetime,
        station_id: Optional[int] = None,
        require_first_stage: bool = False,
        require_second_stage: bool = False,
        limit: int = 100
    ) -> List[ObservingTime]:
        """
        Observing times between two instants, newest first, entries loaded.

        Args:
            db: Database session
            start: Inclusive start (UTC)
            end: Inclusive end (UTC)
            station_id: Only this station, or every station when None
            require_first_stage: Only slots with a first-card entry
            require_second_stage: Only slots with a second-card entry
            limit: Maximum number of records to return

        Returns:
            List of ObservingTime instances
        """
        query = (
            select(ObservingTime)
            .options(
                selectinload(ObservingTime.meteorological_entries),
                selectinload(ObservingTime.weather_observations),
            )
            .where(
                and_(
                    ObservingTime.utc_time >= start,
                    ObservingTime.utc_time <= end
                )
            )
        )
        if station_id is not None:
            query = query.where(ObservingTime.station_id == station_id)
        if require_first_stage:
            query = query.where(ObservingTime.meteorological_entries.any())
        if require_second_stage:
            query = query.where(ObservingTime.weather_observations.any())

        result = await db.execute(
            query.order_by(ObservingTime.utc_time.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return result.scalars().all()

    async def get_for_day(
        self, db: AsyncSession, *, station_id: int, start: datetime, end: datetime
    ) -> List[ObservingTime]:
        """All of a station's observing times in a day, oldest first, entries loaded."""
        result = await db.execute(
            select(ObservingTime)
            .options(
                selectinload(ObservingTime.meteorological_entries),
                selectinload(ObservingTime.weather_observations),
            )
            .where(
                and_(
                    ObservingTime.station_id == station_id,
                    ObservingTime.utc_time >= start,
                    ObservingTime.utc_time <= end
                )
            )
            .order_by(ObservingTime.utc_time, ObservingTime.id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().all()

    async def get_today_flags(
        self, db: AsyncSession, *, station_id: int, start: datetime, end: datetime
    ) -> List[Tuple[ObservingTime, bool, bool, bool]]:
        """
        A station's observing times for one day with what has been filed.

        Returns:
            List of (observing time, has first card, has second card,
            has daily summary), oldest first
        """
        has_first = ObservingTime.meteorological_entries.any()
        has_second = ObservingTime.weather_observations.any()
        has_summary = (
            select(DailySummary.id)
            .where(DailySummary.observing_time_id == ObservingTime.id)
            .correlate(ObservingTime)
            .exists()
        )
        result = await db.execute(
            select(ObservingTime, has_first, has_second, has_summary)
            .where(
                and_(
                    ObservingTime.station_id == station_id,
                    ObservingTime.utc_time >= start,
                    ObservingTime.utc_time <= end
                )
            )
            .order_by(ObservingTime.utc_time)
        )
        return [(row[0], bool(row[1]), bool(row[2]), bool(row[3])) for row in result.all()]


observing_time = CRUDObservingTime(ObservingTime)
