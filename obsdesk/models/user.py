"""
User and session database models.

Users sign in with email and password; everybody except a super admin is
bound to a single station. A UserSession row backs each issued token.
"""

import enum

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from obsdesk.models.base import BaseModel


class UserRole(str, enum.Enum):
    SUPER_ADMIN = "super_admin"
    STATION_ADMIN = "station_admin"
    OBSERVER = "observer"


class User(BaseModel):
    """
    Application user.

    Super admins act across every station. Station admins and observers
    only ever see their own station.
    """

    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(200), nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.OBSERVER.value, comment="super_admin, station_admin or observer")
    station_id = Column(
        Integer,
        ForeignKey("stations.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Assigned station; NULL only for super admins"
    )
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    station = relationship("Station", back_populates="users")
    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint(
            "role IN ('super_admin', 'station_admin', 'observer')",
            name="check_user_role"
        ),
    )

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN.value

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"


class UserSession(BaseModel):
    """
    Server-side sign-in session.

    Sessions are short lived; at most one unexpired session per user is
    accepted at sign-in.
    """

    __tablename__ = "user_sessions"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    token = Column(String(128), unique=True, index=True, nullable=False, comment="Opaque session id carried in the JWT")
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(500), nullable=True)

    user = relationship("User", back_populates="sessions")

    def __repr__(self):
        return f"<UserSession(id={self.id}, user_id={self.user_id}, expires_at={self.expires_at})>"
