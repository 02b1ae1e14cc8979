"""
Daily agroclimatological form.

One form per station and date. A second submission for the same day is a
conflict; the stored form is never replaced.
"""

from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from obsdesk.core.errors import ConflictError, ServerError
from obsdesk.crud.agro import agroclimatological as agroclimatological_crud
from obsdesk.models.agro import AgroclimatologicalRecord
from obsdesk.schemas.agro import AgroclimatologicalCreate
from obsdesk.services.audit import LogAction, LogModule, log_action
from obsdesk.utils.logging_config import get_logger
from obsdesk.utils.synoptic_time import utc_now

logger = get_logger(__name__)

DUPLICATE_MESSAGE = "Data for this station and date already exists. Please update instead."


async def submit_agroclimatological(
    db: AsyncSession,
    session,
    station_id: int,
    payload: AgroclimatologicalCreate,
) -> AgroclimatologicalRecord:
    """
    Store the daily form of a station.

    Args:
        db: Database session
        session: CurrentSession of the submitter
        station_id: Target station (already scoped and checked)
        payload: The form

    Returns:
        The new AgroclimatologicalRecord

    Raises:
        ConflictError: If the station already has a form for that date
        ServerError: If the database write fails
    """
    record = AgroclimatologicalRecord(
        station_id=station_id,
        user_id=session.user_id,
        utc_time=utc_now(),
        **payload.record_fields(),
    )
    try:
        db.add(record)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(DUPLICATE_MESSAGE)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"Failed to save agroclimatological data for station {station_id}: {e}")
        raise ServerError("Failed to save agroclimatological data")

    await db.refresh(record)
    logger.info(f"Agroclimatological data saved: station={station_id} date={record.date.isoformat()}")
    await log_action(
        db,
        session,
        LogAction.CREATE,
        LogModule.AGROCLIMATOLOGICAL,
        f"Agroclimatological data saved for {record.date.isoformat()}",
        target_id=record.id,
    )
    return record


async def list_agroclimatological(
    db: AsyncSession,
    station_id: Optional[int],
    start_date: Optional[date],
    end_date: Optional[date],
    skip: int = 0,
    limit: int = 50,
) -> Tuple[List[AgroclimatologicalRecord], int]:
    """A page of daily forms, newest date first, with the total match count."""
    try:
        return await agroclimatological_crud.get_page(
            db, station_id=station_id, start_date=start_date, end_date=end_date, skip=skip, limit=limit
        )
    except SQLAlchemyError as e:
        logger.exception(f"Failed to load agroclimatological data: {e}")
        raise ServerError("Failed to load agroclimatological data")
