"""
Daily summary CRUD operations.

Summaries are append-only; the latest row (highest id) for a station and
date is the current one.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy import and_, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from obsdesk.crud.base import CRUDBase
from obsdesk.models.daily_summary import DailySummary


class CRUDDailySummary(CRUDBase[DailySummary, DailySummary, dict]):
    """
    CRUD operations for DailySummary model.
    """

    async def get_latest(
        self, db: AsyncSession, *, day: date, station_id: Optional[int] = None
    ) -> Optional[DailySummary]:
        """
        Latest summary for a date.

        Args:
            db: Database session
            day: Summary date
            station_id: Only this station, or any station when None

        Returns:
            DailySummary instance or None if not found
        """
        query = select(DailySummary).where(DailySummary.date == day)
        if station_id is not None:
            query = query.where(DailySummary.station_id == station_id)
        result = await db.execute(query.order_by(DailySummary.id.desc()).limit(1))
        return result.scalars().first()

    async def get_latest_in_range(
        self,
        db: AsyncSession,
        *,
        start_date: date,
        end_date: date,
        station_id: Optional[int] = None,
        limit: int = 1000
    ) -> List[DailySummary]:
        """
        Latest summary per (station, date) in a date range, newest date first.

        Args:
            db: Database session
            start_date: Inclusive start date
            end_date: Inclusive end date
            station_id: Only this station, or every station when None
            limit: Maximum number of records to return

        Returns:
            List of DailySummary instances
        """
        filters = [DailySummary.date >= start_date, DailySummary.date <= end_date]
        if station_id is not None:
            filters.append(DailySummary.station_id == station_id)

        latest_ids = (
            select(func.max(DailySummary.id))
            .where(and_(*filters))
            .group_by(DailySummary.station_id, DailySummary.date)
        )
        result = await db.execute(
            select(DailySummary)
            .where(DailySummary.id.in_(latest_ids))
            .order_by(DailySummary.date.desc(), DailySummary.station_id)
            .limit(limit)
        )
        return result.scalars().all()


daily_summary = CRUDDailySummary(DailySummary)
