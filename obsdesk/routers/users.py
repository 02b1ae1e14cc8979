"""
User management router.

Super admins manage everybody. Station admins manage the observers of
their own station. Observers cannot manage users.
"""

import math
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from obsdesk.core.errors import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from obsdesk.crud.station import station as station_crud
from obsdesk.crud.user import user as user_crud
from obsdesk.database import get_db
from obsdesk.dependencies.auth import CurrentSession, require_roles
from obsdesk.models.user import UserRole
from obsdesk.schemas.users import User, UserCreate, UserPage, UserUpdate
from obsdesk.services.audit import LogAction, LogModule, log_action
from obsdesk.utils.logging_config import get_logger
from obsdesk.utils.rate_limit import DEFAULT_LIMIT, WRITE_LIMIT, limiter

logger = get_logger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={401: {"description": "Unauthorized"}, 403: {"description": "Forbidden"}},
)

require_admin = require_roles(UserRole.SUPER_ADMIN, UserRole.STATION_ADMIN)
require_super_admin = require_roles(UserRole.SUPER_ADMIN)


async def _check_station(db: AsyncSession, role: UserRole, station_id: Optional[int]) -> None:
    if role == UserRole.SUPER_ADMIN:
        return
    if station_id is None:
        raise InvalidInputError("station_id is required for station admins and observers")
    if await station_crud.get(db, station_id) is None:
        raise NotFoundError(f"No station found with ID: {station_id}")


@router.get("", response_model=UserPage)
@limiter.limit(DEFAULT_LIMIT)
async def read_users(
    request: Request,
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=100),
    station_id: Optional[int] = Query(None, description="Station filter (super admin only)"),
    session: CurrentSession = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Page through users, newest first.

    Station admins only see the observers of their station.
    """
    if session.is_super_admin:
        users, total = await user_crud.get_page(
            db, station_id=station_id, skip=(page - 1) * per_page, limit=per_page
        )
    else:
        users, total = await user_crud.get_page(
            db,
            station_id=session.station_id,
            role=UserRole.OBSERVER.value,
            skip=(page - 1) * per_page,
            limit=per_page,
        )
    return UserPage(
        items=users,
        total=total,
        page=page,
        per_page=per_page,
        total_pages=math.ceil(total / per_page),
    )


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
async def create_user(
    request: Request,
    user_in: UserCreate,
    session: CurrentSession = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a user.

    Station admins may only create observers, always at their own station.
    """
    if not session.is_super_admin:
        if user_in.role != UserRole.OBSERVER:
            raise ForbiddenError("Station admins can only create observers")
        user_in = user_in.model_copy(update={"station_id": session.station_id})

    if user_in.role == UserRole.SUPER_ADMIN:
        user_in = user_in.model_copy(update={"station_id": None})
    await _check_station(db, user_in.role, user_in.station_id)

    if await user_crud.get_by_email(db, email=user_in.email):
        raise ConflictError("A user with this email already exists")

    user_obj = await user_crud.create(db, obj_in=user_in)
    logger.info(f"User created: {user_obj.email} ({user_obj.role}) by {session.email}")
    await log_action(
        db, session, LogAction.CREATE, LogModule.USER,
        f"User {user_obj.email} created", target_id=user_obj.id, target_email=user_obj.email,
    )
    return user_obj


@router.put("/{user_id}", response_model=User)
@limiter.limit(WRITE_LIMIT)
async def update_user(
    request: Request,
    user_id: int,
    user_in: UserUpdate,
    session: CurrentSession = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Update a user.

    Only a super admin edits a super admin or promotes anybody to super
    admin. Station admins edit observers of their own station (and
    themselves) but never other station admins, and cannot change roles.
    """
    user_obj = await user_crud.get(db, user_id)
    if user_obj is None:
        raise NotFoundError("User not found")

    if not session.is_super_admin:
        if user_obj.role == UserRole.SUPER_ADMIN.value:
            raise ForbiddenError("Only a super admin can edit a super admin")
        if user_obj.role == UserRole.STATION_ADMIN.value and user_obj.id != session.user_id:
            raise ForbiddenError("Station admins cannot edit other station admins")
        if user_obj.station_id != session.station_id:
            raise ForbiddenError()
        if user_in.role is not None and user_in.role.value != user_obj.role:
            raise ForbiddenError("Only a super admin can change roles")
        if user_in.station_id is not None and user_in.station_id != session.station_id:
            raise ForbiddenError("Station admins cannot move users to another station")

    if user_in.email and user_in.email != user_obj.email:
        if await user_crud.get_by_email(db, email=user_in.email):
            raise ConflictError("A user with this email already exists")

    new_role = user_in.role or UserRole(user_obj.role)
    if new_role == UserRole.SUPER_ADMIN:
        user_in = user_in.model_copy(update={"station_id": None})
    else:
        new_station = user_in.station_id if user_in.station_id is not None else user_obj.station_id
        await _check_station(db, new_role, new_station)

    changes = sorted(k for k in user_in.model_dump(exclude_unset=True) if k != "password")
    user_obj = await user_crud.update(db, db_obj=user_obj, obj_in=user_in)
    await log_action(
        db, session, LogAction.UPDATE, LogModule.USER,
        f"User {user_obj.email} updated", target_id=user_obj.id, target_email=user_obj.email,
        details={"fields": changes},
    )
    return user_obj


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(WRITE_LIMIT)
async def delete_user(
    request: Request,
    user_id: int,
    session: CurrentSession = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
):
    """Delete a user. Super admin only; never yourself and never a super admin."""
    if user_id == session.user_id:
        raise ForbiddenError("You cannot delete your own account")

    user_obj = await user_crud.get(db, user_id)
    if user_obj is None:
        raise NotFoundError("User not found")
    if user_obj.role == UserRole.SUPER_ADMIN.value:
        raise ForbiddenError("Super admin accounts cannot be deleted")

    email = user_obj.email
    await user_crud.remove(db, id=user_id)
    logger.info(f"User deleted: {email} by {session.email}")
    await log_action(
        db, session, LogAction.DELETE, LogModule.USER,
        f"User {email} deleted", target_id=user_id, target_email=email,
    )
