"""
Authentication and access policy dependencies.

``get_current_session`` turns a Bearer token into the caller's session.
``scope_filter`` and ``ensure_station_access`` are the single place where
station visibility is decided: super admins see every station, everybody
else only their own.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from obsdesk.core.errors import ForbiddenError, UnauthorizedError
from obsdesk.core.security import verify_token
from obsdesk.crud.user import user as user_crud
from obsdesk.crud.user import user_session as session_crud
from obsdesk.database import get_db
from obsdesk.models.user import UserRole
from obsdesk.utils.synoptic_time import ensure_utc


@dataclass(frozen=True)
class CurrentSession:
    """The signed-in caller."""

    user_id: int
    email: str
    name: str
    role: str
    station_id: Optional[int]
    session_token: str

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN.value


security = HTTPBearer(auto_error=False)


async def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> CurrentSession:
    """
    Resolve the Bearer token to a live session.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        CurrentSession for the caller

    Raises:
        UnauthorizedError: If the token is missing, invalid or expired, or the
            session or user no longer exists
    """
    if credentials is None:
        raise UnauthorizedError("Not authenticated")

    payload = verify_token(credentials.credentials)
    if not payload or "sid" not in payload:
        raise UnauthorizedError("Invalid or expired token")

    stored = await session_crud.get_by_token(db, token=payload["sid"])
    if stored is None or ensure_utc(stored.expires_at) <= datetime.now(timezone.utc):
        raise UnauthorizedError("Session expired")

    user_obj = await user_crud.get(db, stored.user_id)
    if user_obj is None or not user_obj.is_active:
        raise UnauthorizedError("Session expired")

    return CurrentSession(
        user_id=user_obj.id,
        email=user_obj.email,
        name=user_obj.name,
        role=user_obj.role,
        station_id=user_obj.station_id,
        session_token=stored.token,
    )


def require_roles(*roles: UserRole) -> Callable:
    """
    Dependency factory restricting an endpoint to the given roles.

    Example:
        @router.post("/", dependencies=[Depends(require_roles(UserRole.SUPER_ADMIN))])
    """
    allowed = {role.value for role in roles}

    async def checker(session: CurrentSession = Depends(get_current_session)) -> CurrentSession:
        if session.role not in allowed:
            raise ForbiddenError()
        return session

    return checker


def scope_filter(session: CurrentSession, requested_station_id: Optional[int] = None) -> Optional[int]:
    """
    Effective station filter for a query.

    Args:
        session: The caller
        requested_station_id: Station the caller asked for, if any

    Returns:
        For a super admin the requested station (None means all stations);
        for anybody else their own station, whatever they asked for

    Raises:
        ForbiddenError: If a station-bound role has no station assigned
    """
    if session.is_super_admin:
        return requested_station_id
    if session.station_id is None:
        raise ForbiddenError("No station assigned to this account")
    return session.station_id


def ensure_station_access(session: CurrentSession, station_id: int) -> None:
    """
    Raise ForbiddenError unless the caller may touch records of ``station_id``.
    """
    if session.is_super_admin:
        return
    if session.station_id is None or session.station_id != station_id:
        raise ForbiddenError()


def require_station(session: CurrentSession) -> int:
    """
    The caller's own station, for actions that only make sense at a station.

    Raises:
        ForbiddenError: If the caller has no station (e.g. a super admin)
    """
    if session.station_id is None:
        raise ForbiddenError("A station-bound account is required for this action")
    return session.station_id
