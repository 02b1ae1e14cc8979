"""
Authentication router.

Sign-in with email, password and (for station-bound users) the station's
security code. Each user may hold one live session at a time.
"""

import secrets
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from obsdesk.config import settings
from obsdesk.core.errors import ForbiddenError, InvalidInputError, NotFoundError, UnauthorizedError
from obsdesk.core.security import create_access_token, generate_session_token, verify_password
from obsdesk.crud.station import station as station_crud
from obsdesk.crud.user import user as user_crud
from obsdesk.crud.user import user_session as session_crud
from obsdesk.database import get_db
from obsdesk.dependencies.auth import CurrentSession, get_current_session
from obsdesk.models.user import UserRole, UserSession
from obsdesk.schemas.auth import SessionUser, SignInRequest, TokenResponse
from obsdesk.utils.logging_config import get_logger
from obsdesk.utils.rate_limit import DEFAULT_LIMIT, SIGN_IN_LIMIT, limiter

logger = get_logger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["authentication"],
    responses={401: {"description": "Unauthorized"}},
)


@router.post("/sign-in", response_model=TokenResponse)
@limiter.limit(SIGN_IN_LIMIT)  # Strict limit to prevent brute force attacks
async def sign_in(
    request: Request,
    credentials: SignInRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Authenticate a user and open a session.

    Rate limit: 5 requests per minute

    Raises:
        UnauthorizedError: Wrong email, password or security code
        ForbiddenError: Inactive account, wrong station, or a live session
            already exists for the user
        NotFoundError: Unknown station code
    """
    user_obj = await user_crud.get_by_email(db, email=credentials.email)
    if not user_obj or not verify_password(credentials.password, user_obj.hashed_password):
        raise UnauthorizedError("Incorrect email or password")

    if not user_obj.is_active:
        raise ForbiddenError("User account is inactive")

    if user_obj.role != UserRole.SUPER_ADMIN.value:
        if not credentials.station_code or not credentials.security_code:
            raise InvalidInputError("Station code and security code are required")
        station_obj = await station_crud.get_by_code(db, station_code=credentials.station_code)
        if station_obj is None:
            raise NotFoundError("Station not found")
        if not secrets.compare_digest(credentials.security_code, station_obj.security_code):
            raise UnauthorizedError("Invalid security code")
        if user_obj.station_id != station_obj.id:
            raise ForbiddenError("You are not assigned to this station")

    now = datetime.now(timezone.utc)
    if await session_crud.get_active_for_user(db, user_id=user_obj.id, now=now):
        raise ForbiddenError("You are already logged in from another device")

    await session_crud.remove_expired_for_user(db, user_id=user_obj.id, now=now)
    expires_at = now + timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)
    new_session = UserSession(
        user_id=user_obj.id,
        token=generate_session_token(),
        expires_at=expires_at,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    db.add(new_session)
    await db.commit()

    logger.info(f"User {user_obj.email} signed in ({user_obj.role})")
    return TokenResponse(
        access_token=create_access_token(str(user_obj.id), new_session.token, expires_at),
        token_type="bearer",
        expires_at=expires_at,
        user=SessionUser.model_validate(user_obj),
    )


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(DEFAULT_LIMIT)
async def sign_out(
    request: Request,
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """End the current session."""
    stored = await session_crud.get_by_token(db, token=session.session_token)
    if stored is not None:
        await db.delete(stored)
        await db.commit()
    logger.info(f"User {session.email} signed out")


@router.get("/me", response_model=SessionUser)
@limiter.limit(DEFAULT_LIMIT)
async def read_current_user(
    request: Request,
    session: CurrentSession = Depends(get_current_session)
):
    """Details of the signed-in user."""
    return SessionUser(
        id=session.user_id,
        email=session.email,
        name=session.name,
        role=session.role,
        station_id=session.station_id,
    )
