"""
Agroclimatological data CRUD operations.
"""

from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from obsdesk.core.errors import ConflictError
from obsdesk.crud.base import CRUDBase
from obsdesk.models.agro import AgroclimatologicalRecord, SoilMoistureRecord, SunshineRecord
from obsdesk.schemas.agro import SoilMoistureCreate, SunshineCreate


class CRUDSunshine(CRUDBase[SunshineRecord, SunshineCreate, SunshineCreate]):
    """
    CRUD operations for SunshineRecord model.
    """

    async def get_for_date(
        self, db: AsyncSession, *, station_id: int, day: date
    ) -> Optional[SunshineRecord]:
        result = await db.execute(
            select(SunshineRecord).where(
                and_(
                    SunshineRecord.station_id == station_id,
                    SunshineRecord.date == day
                )
            )
        )
        return result.scalars().first()

    async def upsert(
        self, db: AsyncSession, *, station_id: int, user_id: int, obj_in: SunshineCreate
    ) -> SunshineRecord:
        """
        Create or replace the sunshine record of a station for a date.

        Args:
            db: Database session
            station_id: Station ID
            user_id: Submitting user
            obj_in: Sunshine data

        Returns:
            The stored SunshineRecord

        Raises:
            ConflictError: If a concurrent request created the record first
        """
        existing = await self.get_for_date(db, station_id=station_id, day=obj_in.date)
        values = {"hours": obj_in.hours, "total": obj_in.total, "user_id": user_id}
        if existing:
            return await self.update(db, db_obj=existing, obj_in=values)
        try:
            return await self.create(
                db, obj_in={"station_id": station_id, "date": obj_in.date, **values}
            )
        except IntegrityError:
            # Another request stored the same day first
            await db.rollback()
            raise ConflictError(f"Sunshine record for {obj_in.date.isoformat()} is being saved by another request")


class CRUDSoilMoisture(CRUDBase[SoilMoistureRecord, SoilMoistureCreate, SoilMoistureCreate]):
    """
    CRUD operations for SoilMoistureRecord model.
    """
    pass


class CRUDAgroclimatological(CRUDBase[AgroclimatologicalRecord, dict, dict]):
    """
    CRUD operations for AgroclimatologicalRecord model.
    """

    async def get_page(
        self,
        db: AsyncSession,
        *,
        station_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        skip: int = 0,
        limit: int = 50
    ) -> Tuple[List[AgroclimatologicalRecord], int]:
        """
        Page through daily forms, newest date first.

        Args:
            db: Database session
            station_id: Only this station, or every station when None
            start_date: Inclusive first date
            end_date: Inclusive last date
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (records on the page, total matching records)
        """
        filters = []
        if station_id is not None:
            filters.append(AgroclimatologicalRecord.station_id == station_id)
        if start_date is not None:
            filters.append(AgroclimatologicalRecord.date >= start_date)
        if end_date is not None:
            filters.append(AgroclimatologicalRecord.date <= end_date)

        total = await self.count(db, *filters)
        result = await db.execute(
            select(AgroclimatologicalRecord)
            .where(*filters)
            .order_by(AgroclimatologicalRecord.date.desc(), AgroclimatologicalRecord.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return result.scalars().all(), total


sunshine = CRUDSunshine(SunshineRecord)
soil_moisture = CRUDSoilMoisture(SoilMoistureRecord)
agroclimatological = CRUDAgroclimatological(AgroclimatologicalRecord)
