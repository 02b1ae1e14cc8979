"""
Observation time router.

Tells the client which card may be filled for a synoptic hour, and lists
today's observation slots.
"""

from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from obsdesk.crud.observation import observing_time as observing_time_crud
from obsdesk.database import get_db
from obsdesk.dependencies.auth import CurrentSession, get_current_session, require_station
from obsdesk.schemas.observations import MeteorologicalEntry
from obsdesk.schemas.time_check import SlotDecisionResponse, TimeCheckRequest, TodaySlot, YesterdayData
from obsdesk.services.slot_checker import check_slot
from obsdesk.utils.rate_limit import DEFAULT_LIMIT, limiter
from obsdesk.utils.synoptic_time import ensure_utc, today_utc_range, utc_to_hour

router = APIRouter(
    prefix="/time-check",
    tags=["observations"],
    responses={401: {"description": "Unauthorized"}},
)


@router.post("", response_model=SlotDecisionResponse)
@limiter.limit(DEFAULT_LIMIT)
async def time_check(
    request: Request,
    body: TimeCheckRequest,
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """
    Check which card may be submitted for an hour today.

    A "no" is still a 200 response; the reason is in ``message``.
    Yesterday's first card for the same hour is included for pre-fill.
    """
    station_id = require_station(session)
    decision = await check_slot(db, body.hour, station_id)
    return SlotDecisionResponse(
        allow_first_card=decision.allow_first_card,
        allow_second_card=decision.allow_second_card,
        message=decision.message,
        time=decision.time,
        yesterday=YesterdayData(
            first_stage_entries=[
                MeteorologicalEntry.model_validate(entry)
                for entry in decision.yesterday_first_stage_entries
            ]
        ),
    )


@router.get("/today", response_model=List[TodaySlot])
@limiter.limit(DEFAULT_LIMIT)
async def today_slots(
    request: Request,
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """Today's observation slots at the caller's station, oldest first."""
    station_id = require_station(session)
    start, end = today_utc_range()
    rows = await observing_time_crud.get_today_flags(db, station_id=station_id, start=start, end=end)
    return [
        TodaySlot(
            id=slot.id,
            hour=utc_to_hour(slot.utc_time),
            utc_time=ensure_utc(slot.utc_time),
            local_time=slot.local_time,
            has_first_stage_entry=has_first,
            has_second_stage_entry=has_second,
            has_daily_summary=has_summary,
        )
        for slot, has_first, has_second, has_summary in rows
    ]
