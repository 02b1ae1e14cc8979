"""
Status router.

This module contains the authenticated status endpoint.
"""

from fastapi import APIRouter, Depends, Request

from obsdesk.dependencies.auth import CurrentSession, get_current_session
from obsdesk.utils.rate_limit import DEFAULT_LIMIT, limiter

router = APIRouter(
    prefix="/status",
    tags=["status"],
    responses={
        401: {"description": "Unauthorized"},
    },
)


@router.get("", response_model=dict)
@limiter.limit(DEFAULT_LIMIT)
async def get_status(
    request: Request,
    session: CurrentSession = Depends(get_current_session)
):
    """
    Get API status.

    Requires a valid session.

    Returns:
        dict: Status information
    """
    return {
        "status": "ok",
        "authenticated": True,
        "role": session.role,
        "station_id": session.station_id,
    }
