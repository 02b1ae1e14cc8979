"""
Synoptic code CRUD operations.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from obsdesk.crud.base import CRUDBase
from obsdesk.models.observing_time import ObservingTime
from obsdesk.models.synoptic_code import SynopticCode


class CRUDSynopticCode(CRUDBase[SynopticCode, SynopticCode, dict]):
    """
    CRUD operations for SynopticCode model.
    """

    async def get_for_slot(self, db: AsyncSession, *, observing_time_id: int) -> Optional[SynopticCode]:
        result = await db.execute(
            select(SynopticCode).where(SynopticCode.observing_time_id == observing_time_id)
        )
        return result.scalars().first()

    async def get_in_range(
        self,
        db: AsyncSession,
        *,
        start: datetime,
        end: datetime,
        station_id: Optional[int] = None
    ) -> List[SynopticCode]:
        """
        Reports whose slot falls between two instants, newest slot first.

        Args:
            db: Database session
            start: Inclusive start (UTC)
            end: Inclusive end (UTC)
            station_id: Only this station, or every station when None

        Returns:
            List of SynopticCode instances
        """
        query = (
            select(SynopticCode)
            .join(ObservingTime, SynopticCode.observing_time_id == ObservingTime.id)
            .where(
                and_(
                    ObservingTime.utc_time >= start,
                    ObservingTime.utc_time <= end
                )
            )
        )
        if station_id is not None:
            query = query.where(SynopticCode.station_id == station_id)

        result = await db.execute(query.order_by(ObservingTime.utc_time.desc(), SynopticCode.id.desc()))
        return result.scalars().all()


synoptic_code = CRUDSynopticCode(SynopticCode)
