"""
User CRUD operations.

This module contains CRUD operations specific to user management and
sign-in sessions.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import and_, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from obsdesk.core.security import get_password_hash
from obsdesk.crud.base import CRUDBase
from obsdesk.models.user import User, UserSession
from obsdesk.schemas.users import UserCreate, UserUpdate


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    """
    CRUD operations for User model.
    """

    async def create(self, db: AsyncSession, *, obj_in: UserCreate) -> User:
        """
        Create a new user with a hashed password.

        Args:
            db: Database session
            obj_in: User creation data

        Returns:
            Created user instance
        """
        db_obj = User(
            email=obj_in.email,
            name=obj_in.name,
            hashed_password=get_password_hash(obj_in.password),
            role=obj_in.role.value,
            station_id=obj_in.station_id,
            is_active=True,
        )
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def update(self, db: AsyncSession, *, db_obj: User, obj_in: UserUpdate) -> User:
        """Update a user, hashing a new password when one is given."""
        update_data = obj_in.model_dump(exclude_unset=True)
        password = update_data.pop("password", None)
        if password:
            update_data["hashed_password"] = get_password_hash(password)
        if update_data.get("role") is not None:
            update_data["role"] = update_data["role"].value
        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            db: Database session
            email: User email address

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def get_page(
        self,
        db: AsyncSession,
        *,
        station_id: Optional[int] = None,
        role: Optional[str] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[User], int]:
        """
        Page through users, newest first.

        Args:
            db: Database session
            station_id: Only users of this station
            role: Only users with this role
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (users on the page, total matching users)
        """
        filters = []
        if station_id is not None:
            filters.append(User.station_id == station_id)
        if role is not None:
            filters.append(User.role == role)

        total = await self.count(db, *filters)
        result = await db.execute(
            select(User)
            .where(*filters)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return result.scalars().all(), total


class CRUDUserSession(CRUDBase[UserSession, UserSession, dict]):
    """
    CRUD operations for sign-in sessions.
    """

    async def get_by_token(self, db: AsyncSession, *, token: str) -> Optional[UserSession]:
        result = await db.execute(select(UserSession).where(UserSession.token == token))
        return result.scalars().first()

    async def get_active_for_user(
        self, db: AsyncSession, *, user_id: int, now: datetime
    ) -> Optional[UserSession]:
        """
        Most recent unexpired session of a user.

        Args:
            db: Database session
            user_id: User ID
            now: Current time (UTC)

        Returns:
            UserSession instance or None
        """
        result = await db.execute(
            select(UserSession)
            .where(
                and_(
                    UserSession.user_id == user_id,
                    UserSession.expires_at > now
                )
            )
            .order_by(UserSession.expires_at.desc())
            .limit(1)
        )
        return result.scalars().first()

    async def remove_expired_for_user(self, db: AsyncSession, *, user_id: int, now: datetime) -> None:
        """Delete a user's expired sessions."""
        await db.execute(
            delete(UserSession).where(
                and_(
                    UserSession.user_id == user_id,
                    UserSession.expires_at <= now
                )
            )
        )


user = CRUDUser(User)
user_session = CRUDUserSession(UserSession)
