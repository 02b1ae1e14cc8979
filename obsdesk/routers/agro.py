"""
Agroclimatological data router.

Sunshine duration (one record per station and day), soil moisture and the
daily agroclimatological form.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from obsdesk.core.errors import InvalidInputError, NotFoundError
from obsdesk.crud.agro import soil_moisture as soil_moisture_crud
from obsdesk.crud.agro import sunshine as sunshine_crud
from obsdesk.crud.station import station as station_crud
from obsdesk.database import get_db
from obsdesk.dependencies.auth import CurrentSession, get_current_session, scope_filter
from obsdesk.schemas.agro import (
    Agroclimatological,
    AgroclimatologicalCreate,
    AgroclimatologicalPage,
    SoilMoisture,
    SoilMoistureCreate,
    Sunshine,
    SunshineCreate,
)
from obsdesk.services.agroclimatological import list_agroclimatological, submit_agroclimatological
from obsdesk.services.audit import LogAction, LogModule, log_action
from obsdesk.utils.rate_limit import DEFAULT_LIMIT, WRITE_LIMIT, limiter

router = APIRouter(
    tags=["agroclimatological"],
    responses={401: {"description": "Unauthorized"}},
)


async def _target_station(db: AsyncSession, session: CurrentSession, requested: Optional[int]) -> int:
    station_id = scope_filter(session, requested)
    if station_id is None:
        raise InvalidInputError("station_id is required")
    if await station_crud.get(db, station_id) is None:
        raise NotFoundError(f"No station found with ID: {station_id}")
    return station_id


@router.post("/sunshine", response_model=Sunshine)
@limiter.limit(WRITE_LIMIT)
async def save_sunshine(
    request: Request,
    sunshine_in: SunshineCreate,
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """Create or replace the sunshine record of a station for a date."""
    station_id = await _target_station(db, session, sunshine_in.station_id)
    record = await sunshine_crud.upsert(db, station_id=station_id, user_id=session.user_id, obj_in=sunshine_in)
    await log_action(
        db, session, LogAction.CREATE, LogModule.SUNSHINE,
        f"Sunshine saved for {sunshine_in.date.isoformat()}", target_id=record.id,
    )
    return record


@router.get("/sunshine", response_model=List[Sunshine])
@limiter.limit(DEFAULT_LIMIT)
async def read_sunshine(
    request: Request,
    station_id: Optional[int] = Query(None, description="Station filter (super admin only)"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """Sunshine records, newest first."""
    return await sunshine_crud.get_multi(
        db, station_id=scope_filter(session, station_id), skip=skip, limit=limit
    )


@router.post("/soil-moisture", response_model=SoilMoisture, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
async def save_soil_moisture(
    request: Request,
    soil_in: SoilMoistureCreate,
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """Record a soil moisture reading."""
    station_id = await _target_station(db, session, soil_in.station_id)
    values = soil_in.model_dump(exclude={"station_id"})
    record = await soil_moisture_crud.create(
        db, obj_in={**values, "station_id": station_id, "user_id": session.user_id}
    )
    await log_action(
        db, session, LogAction.CREATE, LogModule.SOIL_MOISTURE,
        f"Soil moisture saved for {soil_in.date.isoformat()} at {soil_in.depth} cm", target_id=record.id,
    )
    return record


@router.get("/soil-moisture", response_model=List[SoilMoisture])
@limiter.limit(DEFAULT_LIMIT)
async def read_soil_moisture(
    request: Request,
    station_id: Optional[int] = Query(None, description="Station filter (super admin only)"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """Soil moisture records, newest first."""
    return await soil_moisture_crud.get_multi(
        db, station_id=scope_filter(session, station_id), skip=skip, limit=limit
    )


@router.post(
    "/agroclimatological-data", response_model=Agroclimatological, status_code=status.HTTP_201_CREATED
)
@limiter.limit(WRITE_LIMIT)
async def create_agroclimatological(
    request: Request,
    form_in: AgroclimatologicalCreate,
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """Store the daily agroclimatological form of a station."""
    station_id = await _target_station(db, session, form_in.station_id)
    return await submit_agroclimatological(db, session, station_id, form_in)


@router.get("/agroclimatological-data", response_model=AgroclimatologicalPage)
@limiter.limit(DEFAULT_LIMIT)
async def read_agroclimatological(
    request: Request,
    start_date: Optional[date] = Query(None, description="Inclusive first date"),
    end_date: Optional[date] = Query(None, description="Inclusive last date"),
    station_id: Optional[int] = Query(None, description="Station filter (super admin only)"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """Daily forms, newest date first, one page at a time."""
    if start_date and end_date and end_date < start_date:
        raise InvalidInputError("end_date must not be before start_date")

    items, total = await list_agroclimatological(
        db, scope_filter(session, station_id), start_date, end_date, skip=offset, limit=limit
    )
    return AgroclimatologicalPage(
        items=[Agroclimatological.model_validate(item) for item in items],
        total=total,
        limit=limit,
        offset=offset,
        has_more=offset + len(items) < total,
    )
