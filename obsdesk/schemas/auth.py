"""
Authentication schemas.

This module contains Pydantic schemas for sign-in requests and responses.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from obsdesk.schemas.base import BaseSchema


class SignInRequest(BaseModel):
    """
    Sign-in credentials.

    Station-bound users must also give their station code and the
    station's security code.
    """
    email: EmailStr
    password: str = Field(..., min_length=1)
    station_code: Optional[str] = Field(None, description="Station code (required unless super admin)")
    security_code: Optional[str] = Field(None, description="Station security code (required unless super admin)")


class SessionUser(BaseSchema):
    """User details returned with a session."""
    id: int
    email: EmailStr
    name: str
    role: str
    station_id: Optional[int] = None


class Token(BaseModel):
    """Token schema for authentication."""
    access_token: str
    token_type: str = "bearer"


class TokenResponse(Token):
    """Response schema for a successful sign-in."""
    expires_at: datetime
    user: SessionUser
