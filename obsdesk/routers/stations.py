"""
Stations router.

Everybody signed in can read the stations they are scoped to; only super
admins manage stations.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from obsdesk.core.errors import ConflictError, NotFoundError
from obsdesk.crud.station import station as station_crud
from obsdesk.database import get_db
from obsdesk.dependencies.auth import (
    CurrentSession,
    ensure_station_access,
    get_current_session,
    require_roles,
    scope_filter,
)
from obsdesk.models.user import UserRole
from obsdesk.schemas.station import Station, StationCreate, StationLocation, StationUpdate
from obsdesk.services.audit import LogAction, LogModule, log_action
from obsdesk.utils.logging_config import get_logger
from obsdesk.utils.rate_limit import DEFAULT_LIMIT, WRITE_LIMIT, limiter

logger = get_logger(__name__)

router = APIRouter(
    prefix="/stations",
    tags=["stations"],
    responses={401: {"description": "Unauthorized"}},
)

require_super_admin = require_roles(UserRole.SUPER_ADMIN)


@router.get("/locations", response_model=List[StationLocation])
@limiter.limit(DEFAULT_LIMIT)
async def read_station_locations(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """Name and position of every station, for the public map. No authentication."""
    return await station_crud.get_scoped(db, station_id=None)


@router.get("", response_model=List[Station])
@limiter.limit(DEFAULT_LIMIT)
async def read_stations(
    request: Request,
    station_id: Optional[int] = Query(None, description="Station filter (super admin only)"),
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """Stations visible to the caller."""
    return await station_crud.get_scoped(db, station_id=scope_filter(session, station_id))


@router.get("/{station_id}", response_model=Station)
@limiter.limit(DEFAULT_LIMIT)
async def read_station(
    request: Request,
    station_id: int,
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """One station by ID."""
    ensure_station_access(session, station_id)
    station_obj = await station_crud.get(db, station_id)
    if station_obj is None:
        raise NotFoundError("Station not found")
    return station_obj


@router.post("", response_model=Station, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
async def create_station(
    request: Request,
    station_in: StationCreate,
    session: CurrentSession = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create a station. Super admin only."""
    if await station_crud.get_by_code(db, station_code=station_in.station_code):
        raise ConflictError(f"Station code {station_in.station_code} already exists")

    station_obj = await station_crud.create(db, obj_in=station_in)
    logger.info(f"Station created: {station_obj.station_code} by {session.email}")
    await log_action(
        db, session, LogAction.CREATE, LogModule.STATION,
        f"Station {station_obj.name} created", target_id=station_obj.id,
    )
    return station_obj


@router.put("/{station_id}", response_model=Station)
@limiter.limit(WRITE_LIMIT)
async def update_station(
    request: Request,
    station_id: int,
    station_in: StationUpdate,
    session: CurrentSession = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
):
    """Update a station. Super admin only."""
    station_obj = await station_crud.get(db, station_id)
    if station_obj is None:
        raise NotFoundError("Station not found")

    if station_in.station_code and station_in.station_code != station_obj.station_code:
        if await station_crud.get_by_code(db, station_code=station_in.station_code):
            raise ConflictError(f"Station code {station_in.station_code} already exists")

    changes = station_in.model_dump(exclude_unset=True)
    station_obj = await station_crud.update(db, db_obj=station_obj, obj_in=station_in)
    await log_action(
        db, session, LogAction.UPDATE, LogModule.STATION,
        f"Station {station_obj.name} updated", target_id=station_obj.id,
        details={"fields": sorted(changes)},
    )
    return station_obj


@router.delete("/{station_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(WRITE_LIMIT)
async def delete_station(
    request: Request,
    station_id: int,
    session: CurrentSession = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
):
    """Delete a station and everything recorded for it. Super admin only."""
    station_obj = await station_crud.remove(db, id=station_id)
    if station_obj is None:
        raise NotFoundError("Station not found")
    logger.info(f"Station deleted: {station_obj.station_code} by {session.email}")
    await log_action(
        db, session, LogAction.DELETE, LogModule.STATION,
        f"Station {station_obj.name} deleted", target_id=station_id,
    )
