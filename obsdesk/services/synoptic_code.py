"""
Synoptic code generation and storage.

A report is generated from a closed observation slot (first and second
card both filed). The observer may correct individual groups before it is
saved; each slot keeps at most one stored report.
"""

from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from obsdesk.core.errors import ConflictError, NotFoundError, ServerError
from obsdesk.crud.observation import observing_time as observing_time_crud
from obsdesk.crud.station import station as station_crud
from obsdesk.crud.synoptic_code import synoptic_code as synoptic_code_crud
from obsdesk.dependencies.auth import ensure_station_access
from obsdesk.models.observing_time import ObservingTime
from obsdesk.models.synoptic_code import SynopticCode
from obsdesk.schemas.synoptic_code import SynopticCodeCreate, SynopticCodeUpdate
from obsdesk.services.audit import LogAction, LogModule, log_action
from obsdesk.utils.logging_config import get_logger
from obsdesk.utils.synoptic_code import SYNOPTIC_GROUP_FIELDS, generate_synoptic_code
from obsdesk.utils.synoptic_time import ensure_utc, parse_synoptic_hour, today_utc_range

logger = get_logger(__name__)


async def _closed_slot(
    db: AsyncSession, station_id: int, hour: Optional[str], now: Optional[datetime]
) -> ObservingTime:
    if hour is None:
        start, end = today_utc_range(now)
    else:
        start = end = parse_synoptic_hour(hour, now=now)

    try:
        slots = await observing_time_crud.get_in_range(
            db, start=start, end=end, station_id=station_id, limit=1
        )
    except SQLAlchemyError as e:
        logger.exception(f"Failed to load observing time for station {station_id}: {e}")
        raise ServerError("Failed to generate synoptic code")

    if not slots:
        raise NotFoundError("No observing time for today")
    slot = slots[0]
    if not slot.meteorological_entries or not slot.weather_observations:
        raise NotFoundError("First or second card data not found")
    return slot


async def preview_synoptic_code(
    db: AsyncSession,
    station_id: int,
    hour: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Tuple[ObservingTime, Dict]:
    """
    Generate the report of a station's slot without storing it.

    Args:
        db: Database session
        station_id: Station of the observer
        hour: Synoptic hour code; the latest slot of today when None
        now: Current time, for tests

    Returns:
        Tuple of (ObservingTime, generated report dictionary)

    Raises:
        InvalidInputError: If the hour is not a synoptic hour code
        NotFoundError: If the station, the slot or one of its cards is missing
        ServerError: If the database cannot be read
    """
    station = await station_crud.get(db, station_id)
    if station is None:
        raise NotFoundError(f"No station found with ID: {station_id}")

    slot = await _closed_slot(db, station_id, hour, now)
    report = generate_synoptic_code(
        station.station_code,
        ensure_utc(slot.utc_time),
        slot.meteorological_entries[0],
        slot.weather_observations[0],
    )
    return slot, report


def _apply_corrections(groups: List[str], corrections: Optional[List[Optional[str]]]) -> List[str]:
    if not corrections:
        return list(groups)
    return [group if corrected is None else corrected for group, corrected in zip(groups, corrections)]


async def save_synoptic_code(
    db: AsyncSession,
    session,
    station_id: int,
    payload: SynopticCodeCreate,
    now: Optional[datetime] = None,
) -> SynopticCode:
    """
    Generate, correct and store the report of a slot.

    Raises:
        NotFoundError: If the slot or one of its cards is missing
        ConflictError: If the slot already has a stored report
        ServerError: If the database write fails
    """
    slot, report = await preview_synoptic_code(db, station_id, hour=payload.hour, now=now)
    if await synoptic_code_crud.get_for_slot(db, observing_time_id=slot.id):
        raise ConflictError("Synoptic code already exists for this observing time")

    groups = _apply_corrections(report["measurements"], payload.measurements)
    code = SynopticCode(
        observing_time_id=slot.id,
        station_id=station_id,
        user_id=session.user_id,
        data_type=report["data_type"],
        weather_remark=payload.weather_remark if payload.weather_remark is not None else report["weather_remark"],
        **dict(zip(SYNOPTIC_GROUP_FIELDS, groups)),
    )
    try:
        db.add(code)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning(f"Concurrent synoptic code for observing time {slot.id}")
        raise ConflictError("Synoptic code already exists for this observing time")
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"Failed to save synoptic code for station {station_id}: {e}")
        raise ServerError("Failed to save synoptic code")

    await db.refresh(code)
    hour = f"{ensure_utc(slot.utc_time).hour:02d}"
    logger.info(f"Synoptic code saved: station={station_id} observing_time={slot.id} user={session.user_id}")
    await log_action(
        db,
        session,
        LogAction.CREATE,
        LogModule.SYNOPTIC_CODE,
        f"Synoptic code saved for {hour} UTC",
        target_id=code.id,
        details={"observing_time_id": slot.id},
    )
    return code


async def update_synoptic_code(
    db: AsyncSession,
    session,
    code_id: int,
    payload: SynopticCodeUpdate,
) -> SynopticCode:
    """
    Correct groups of a stored report.

    Raises:
        NotFoundError: If the report does not exist
        ForbiddenError: If the report belongs to another station
    """
    code = await synoptic_code_crud.get(db, code_id)
    if code is None:
        raise NotFoundError("Synoptic code not found")
    ensure_station_access(session, code.station_id)

    changes = {}
    for field, value in zip(SYNOPTIC_GROUP_FIELDS, payload.measurements or []):
        if value is not None and value != getattr(code, field):
            changes[field] = value
    if payload.weather_remark is not None and payload.weather_remark != code.weather_remark:
        changes["weather_remark"] = payload.weather_remark
    if not changes:
        return code

    code = await synoptic_code_crud.update(db, db_obj=code, obj_in=changes)
    await log_action(
        db,
        session,
        LogAction.UPDATE,
        LogModule.SYNOPTIC_CODE,
        f"Synoptic code {code.id} corrected",
        target_id=code.id,
        details={"changed": sorted(changes)},
    )
    return code


async def list_synoptic_codes(
    db: AsyncSession, start: datetime, end: datetime, station_id: Optional[int]
) -> List[SynopticCode]:
    """Stored reports whose slot lies in a range, newest first."""
    try:
        return await synoptic_code_crud.get_in_range(db, start=start, end=end, station_id=station_id)
    except SQLAlchemyError as e:
        logger.exception(f"Failed to load synoptic codes: {e}")
        raise ServerError("Failed to load synoptic codes")
