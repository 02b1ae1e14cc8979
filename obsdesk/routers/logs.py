"""
Audit log router.
"""

import math

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from obsdesk.crud.audit_log import audit_log as audit_log_crud
from obsdesk.database import get_db
from obsdesk.dependencies.auth import CurrentSession, get_current_session, scope_filter
from obsdesk.schemas.logs import AuditLogPage
from obsdesk.utils.rate_limit import DEFAULT_LIMIT, limiter

router = APIRouter(
    prefix="/logs",
    tags=["logs"],
    responses={401: {"description": "Unauthorized"}},
)


@router.get("", response_model=AuditLogPage)
@limiter.limit(DEFAULT_LIMIT)
async def read_logs(
    request: Request,
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=100),
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """
    Page through the audit log, newest first.

    Super admins see every entry; everybody else sees the observer actions
    of their own station.
    """
    entries, total = await audit_log_crud.get_page(
        db,
        station_id=scope_filter(session, None),
        skip=(page - 1) * per_page,
        limit=per_page,
    )
    return AuditLogPage(
        items=entries,
        total=total,
        page=page,
        per_page=per_page,
        total_pages=math.ceil(total / per_page),
    )
