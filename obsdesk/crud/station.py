"""
Station CRUD operations.
"""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from obsdesk.crud.base import CRUDBase
from obsdesk.models.station import Station
from obsdesk.schemas.station import StationCreate, StationUpdate


class CRUDStation(CRUDBase[Station, StationCreate, StationUpdate]):
    """
    CRUD operations for Station model.
    """

    async def get_by_code(self, db: AsyncSession, *, station_code: str) -> Optional[Station]:
        """
        Get station by station code.

        Args:
            db: Database session
            station_code: Unique station code

        Returns:
            Station instance or None if not found
        """
        result = await db.execute(
            select(Station).where(Station.station_code == station_code)
        )
        return result.scalars().first()

    async def get_scoped(self, db: AsyncSession, *, station_id: Optional[int]) -> List[Station]:
        """
        List stations ordered by name.

        Args:
            db: Database session
            station_id: Only this station, or every station when None

        Returns:
            List of Station instances
        """
        query = select(Station).order_by(Station.name)
        if station_id is not None:
            query = query.where(Station.id == station_id)
        result = await db.execute(query)
        return result.scalars().all()


station = CRUDStation(Station)
