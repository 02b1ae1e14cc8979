"""
Audit log CRUD operations.
"""

from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from obsdesk.crud.base import CRUDBase
from obsdesk.models.audit_log import AuditLog
from obsdesk.models.user import UserRole


class CRUDAuditLog(CRUDBase[AuditLog, AuditLog, dict]):
    """
    CRUD operations for AuditLog model.
    """

    async def get_page(
        self,
        db: AsyncSession,
        *,
        station_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[AuditLog], int]:
        """
        Page through audit entries, newest first.

        Args:
            db: Database session
            station_id: Only observer actions at this station; every entry when None
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (entries on the page, total matching entries)
        """
        filters = []
        if station_id is not None:
            filters.append(AuditLog.station_id == station_id)
            filters.append(AuditLog.role == UserRole.OBSERVER.value)

        total = await self.count(db, *filters)
        result = await db.execute(
            select(AuditLog)
            .where(*filters)
            .order_by(AuditLog.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return result.scalars().all(), total


audit_log = CRUDAuditLog(AuditLog)
