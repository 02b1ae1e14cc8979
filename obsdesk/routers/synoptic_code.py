"""
Synoptic code router.

Generate the SYNOP report of an observation slot, store it once, list and
correct stored reports.
"""

from datetime import date, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from obsdesk.core.errors import InvalidInputError
from obsdesk.database import get_db
from obsdesk.dependencies.auth import CurrentSession, get_current_session, require_station, scope_filter
from obsdesk.schemas.synoptic_code import SynopticCode, SynopticCodeCreate, SynopticCodePreview, SynopticCodeUpdate
from obsdesk.services.synoptic_code import (
    list_synoptic_codes,
    preview_synoptic_code,
    save_synoptic_code,
    update_synoptic_code,
)
from obsdesk.utils.rate_limit import DEFAULT_LIMIT, WRITE_LIMIT, limiter
from obsdesk.utils.synoptic_time import day_utc_range, ensure_utc, utc_now

router = APIRouter(
    prefix="/synoptic-code",
    tags=["synoptic code"],
    responses={401: {"description": "Unauthorized"}},
)


@router.get("/generate", response_model=SynopticCodePreview)
@limiter.limit(DEFAULT_LIMIT)
async def generate_synoptic_code(
    request: Request,
    hour: Optional[str] = Query(None, description="Synoptic hour code (default: latest slot of today)"),
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """Generate the report of one of today's slots at the caller's station."""
    slot, report = await preview_synoptic_code(db, require_station(session), hour=hour)
    return SynopticCodePreview(observing_time_id=slot.id, utc_time=ensure_utc(slot.utc_time), **report)


@router.post("", response_model=SynopticCode, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
async def create_synoptic_code(
    request: Request,
    code_in: SynopticCodeCreate,
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """
    Store the report of a slot.

    The report is regenerated from the slot's cards; ``measurements`` entries
    that are not null replace the generated group at the same position.
    """
    return await save_synoptic_code(db, session, require_station(session), code_in)


@router.get("", response_model=List[SynopticCode])
@limiter.limit(DEFAULT_LIMIT)
async def read_synoptic_codes(
    request: Request,
    start_date: Optional[date] = Query(None, description="Start date (default: today)"),
    end_date: Optional[date] = Query(None, description="End date (default: start date)"),
    station_id: Optional[int] = Query(None, description="Station filter (super admin only)"),
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """Stored reports of every slot in a date range, newest first."""
    start_day = start_date or utc_now().date()
    end_day = end_date or start_day
    if end_day < start_day:
        raise InvalidInputError("end_date must not be before start_date")
    if end_day - start_day > timedelta(days=366):
        raise InvalidInputError("Date range cannot exceed 366 days")

    start, _ = day_utc_range(start_day)
    _, end = day_utc_range(end_day)
    return await list_synoptic_codes(db, start, end, scope_filter(session, station_id))


@router.put("/{code_id}", response_model=SynopticCode)
@limiter.limit(WRITE_LIMIT)
async def correct_synoptic_code(
    request: Request,
    code_id: int,
    code_in: SynopticCodeUpdate,
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """Correct groups of a stored report."""
    return await update_synoptic_code(db, session, code_id, code_in)
