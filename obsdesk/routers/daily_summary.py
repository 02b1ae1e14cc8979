"""
Daily summary router.
"""

from datetime import date, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from obsdesk.core.errors import InvalidInputError, NotFoundError
from obsdesk.crud.station import station as station_crud
from obsdesk.database import get_db
from obsdesk.dependencies.auth import CurrentSession, get_current_session, scope_filter
from obsdesk.schemas.daily_summary import DailySummary, DailySummaryComputed, DailySummaryComputeRequest
from obsdesk.services.audit import LogAction, LogModule, log_action
from obsdesk.services.daily_summary import get_latest_summary, list_summaries, recompute_daily_summary
from obsdesk.utils.rate_limit import DEFAULT_LIMIT, WRITE_LIMIT, limiter
from obsdesk.utils.synoptic_time import utc_now

router = APIRouter(
    prefix="/daily-summary",
    tags=["daily summary"],
    responses={401: {"description": "Unauthorized"}},
)


@router.post("/compute", response_model=DailySummaryComputed)
@limiter.limit(WRITE_LIMIT)
async def compute_daily_summary(
    request: Request,
    body: DailySummaryComputeRequest,
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """
    Recompute the daily summary of a station from its observations.

    Defaults to today (UTC) and the caller's station. Super admins must name
    a station when they have none of their own.
    """
    station_id = scope_filter(session, body.station_id)
    if station_id is None:
        raise InvalidInputError("station_id is required")

    station_obj = await station_crud.get(db, station_id)
    if station_obj is None:
        raise NotFoundError(f"No station found with ID: {station_id}")

    day = body.date or utc_now().date()
    summary, aggregate = await recompute_daily_summary(db, station_obj, day, require_observations=True)
    await log_action(
        db,
        session,
        LogAction.CREATE,
        LogModule.DAILY_SUMMARY,
        f"Daily summary computed for {day.isoformat()}",
        target_id=summary.id,
    )
    return DailySummaryComputed(
        summary=DailySummary.model_validate(summary),
        station_no=aggregate["station_no"],
        year=aggregate["year"],
        month=aggregate["month"],
        day=aggregate["day"],
    )


@router.get("/{summary_date}", response_model=DailySummary)
@limiter.limit(DEFAULT_LIMIT)
async def read_daily_summary(
    request: Request,
    summary_date: date,
    station_id: Optional[int] = Query(None, description="Station filter (super admin only)"),
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """Current (latest) daily summary for a date."""
    return await get_latest_summary(db, summary_date, scope_filter(session, station_id))


@router.get("", response_model=List[DailySummary])
@limiter.limit(DEFAULT_LIMIT)
async def read_daily_summaries(
    request: Request,
    start_date: Optional[date] = Query(None, description="Start date (default: 7 days ago)"),
    end_date: Optional[date] = Query(None, description="End date (default: today)"),
    station_id: Optional[int] = Query(None, description="Station filter (super admin only)"),
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """Current daily summary of every station and date in a range, newest first."""
    end_day = end_date or utc_now().date()
    start_day = start_date or end_day - timedelta(days=7)
    if end_day < start_day:
        raise InvalidInputError("end_date must not be before start_date")
    if end_day - start_day > timedelta(days=366):
        raise InvalidInputError("Date range cannot exceed 366 days")

    return await list_summaries(db, start_day, end_day, scope_filter(session, station_id))
