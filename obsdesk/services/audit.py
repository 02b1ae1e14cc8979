"""
Audit logging of user actions.

Audit rows are written in their own session, after the audited change has
been committed. A failed audit write is logged and swallowed; it never
fails the action being audited and leaves the caller's session untouched.
"""

from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from obsdesk.models.audit_log import AuditLog
from obsdesk.utils.logging_config import get_logger

logger = get_logger(__name__)


class LogAction:
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class LogModule:
    USER = "USER"
    STATION = "STATION"
    OBSERVING_TIME = "OBSERVING_TIME"
    METEOROLOGICAL_ENTRY = "METEOROLOGICAL_ENTRY"
    WEATHER_OBSERVATION = "WEATHER_OBSERVATION"
    DAILY_SUMMARY = "DAILY_SUMMARY"
    SUNSHINE = "SUNSHINE"
    SOIL_MOISTURE = "SOIL_MOISTURE"
    SYNOPTIC_CODE = "SYNOPTIC_CODE"
    AGROCLIMATOLOGICAL = "AGROCLIMATOLOGICAL"


async def log_action(
    db: AsyncSession,
    session,
    action: str,
    module: str,
    action_text: str,
    target_id: Optional[Any] = None,
    target_email: Optional[str] = None,
    details: Optional[dict] = None,
) -> None:
    """
    Record an action by the signed-in user.

    Args:
        db: Database session
        session: CurrentSession of the actor
        action: One of LogAction
        module: One of LogModule
        action_text: Human readable description
        target_id: ID of the affected record
        target_email: Email of the affected user, for user management
        details: Extra JSON-serialisable context
    """
    entry = AuditLog(
        user_id=session.user_id,
        station_id=session.station_id,
        actor_email=session.email,
        role=session.role,
        action=action,
        module=module,
        action_text=action_text,
        target_id=None if target_id is None else str(target_id),
        target_email=target_email,
        details=details,
    )
    try:
        async with AsyncSession(bind=db.bind, expire_on_commit=False) as audit_db:
            audit_db.add(entry)
            await audit_db.commit()
    except SQLAlchemyError as e:
        logger.error(f"Failed to write audit log ({module} {action}): {e}")
