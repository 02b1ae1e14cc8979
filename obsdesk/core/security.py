"""
Security utilities.

This module contains password hashing, session token generation and the JWT
access tokens that carry a session reference to the client.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from obsdesk.config import settings

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    """
    Hash a password.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hashed password
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def generate_session_token() -> str:
    """Generate an opaque, URL-safe session identifier."""
    return secrets.token_urlsafe(32)


def create_access_token(
    subject: str,
    session_token: str,
    expires_at: Optional[datetime] = None,
) -> str:
    """
    Create JWT access token bound to a stored session.

    Args:
        subject: User id, stored as the ``sub`` claim
        session_token: Server-side session token, stored as ``sid``
        expires_at: Token expiry; defaults to SESSION_EXPIRE_MINUTES from now

    Returns:
        Encoded JWT token
    """
    if expires_at is None:
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)

    to_encode = {"sub": subject, "sid": session_token, "exp": expires_at}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token.

    Args:
        token: JWT token to verify

    Returns:
        Decoded token data or None if invalid or expired
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
