"""
First- and second-card router.
"""

from datetime import date, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from obsdesk.core.errors import InvalidInputError
from obsdesk.crud.observation import observing_time as observing_time_crud
from obsdesk.database import get_db
from obsdesk.dependencies.auth import CurrentSession, get_current_session, require_station, scope_filter
from obsdesk.schemas.observations import (
    FirstCardCreate,
    ObservingTime,
    SecondCardCreate,
    SubmissionResponse,
)
from obsdesk.services.observations import submit_first_stage, submit_second_stage
from obsdesk.utils.rate_limit import DEFAULT_LIMIT, WRITE_LIMIT, limiter
from obsdesk.utils.synoptic_time import day_utc_range, ensure_utc, today_utc_range, utc_now

router = APIRouter(
    tags=["observations"],
    responses={401: {"description": "Unauthorized"}},
)


@router.post("/first-card", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
async def create_first_card(
    request: Request,
    payload: FirstCardCreate,
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """
    Submit the first card for one of today's synoptic hours.

    Returns 409 if the hour already has an observation at the station.
    """
    station_id = require_station(session)
    slot, entry = await submit_first_stage(db, session, station_id, payload)
    return SubmissionResponse(
        message="First card saved",
        observing_time_id=slot.id,
        utc_time=ensure_utc(slot.utc_time),
        entry_id=entry.id,
    )


@router.get("/first-card", response_model=List[ObservingTime])
@limiter.limit(DEFAULT_LIMIT)
async def list_first_cards(
    request: Request,
    start_date: Optional[date] = Query(None, description="Start date (default: today)"),
    end_date: Optional[date] = Query(None, description="End date (default: start date)"),
    station_id: Optional[int] = Query(None, description="Station filter (super admin only)"),
    limit: int = Query(100, ge=1, le=100),
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """
    Observation slots with a first card, newest first.

    Non-super-admins always see their own station only.
    """
    start_day = start_date or utc_now().date()
    end_day = end_date or start_day
    if end_day < start_day:
        raise InvalidInputError("end_date must not be before start_date")
    if end_day - start_day > timedelta(days=31):
        raise InvalidInputError("Date range cannot exceed 31 days")

    start, _ = day_utc_range(start_day)
    _, end = day_utc_range(end_day)
    return await observing_time_crud.get_in_range(
        db,
        start=start,
        end=end,
        station_id=scope_filter(session, station_id),
        require_first_stage=True,
        limit=limit,
    )


@router.post("/second-card", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
async def create_second_card(
    request: Request,
    payload: SecondCardCreate,
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """
    Submit the second card for an hour whose first card is in.

    Closes the slot and recomputes today's daily summary.
    """
    station_id = require_station(session)
    slot, observation, _summary = await submit_second_stage(db, session, station_id, payload)
    return SubmissionResponse(
        message="Second card saved",
        observing_time_id=slot.id,
        utc_time=ensure_utc(slot.utc_time),
        entry_id=observation.id,
    )


@router.get("/second-card", response_model=List[ObservingTime])
@limiter.limit(DEFAULT_LIMIT)
async def list_second_cards(
    request: Request,
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """Today's observation slots with a second card at the caller's station."""
    station_id = require_station(session)
    start, end = today_utc_range()
    return await observing_time_crud.get_in_range(
        db,
        start=start,
        end=end,
        station_id=station_id,
        require_second_stage=True,
        limit=8,
    )
