"""
User management schemas.
"""

from typing import List, Optional

from pydantic import EmailStr, Field

from obsdesk.models.user import UserRole
from obsdesk.schemas.base import BaseSchema, IDSchema, PageMeta, TimestampSchema


class UserBase(BaseSchema):
    """Base user schema."""
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=200)
    role: UserRole = UserRole.OBSERVER
    station_id: Optional[int] = None


class UserCreate(UserBase):
    """Schema for creating a new user."""
    password: str = Field(..., min_length=8)


class UserUpdate(BaseSchema):
    """Schema for updating user information."""
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    role: Optional[UserRole] = None
    station_id: Optional[int] = None
    password: Optional[str] = Field(None, min_length=8)
    is_active: Optional[bool] = None


class User(UserBase, IDSchema, TimestampSchema):
    """Complete user schema."""
    is_active: bool


class UserPage(PageMeta):
    items: List[User]
