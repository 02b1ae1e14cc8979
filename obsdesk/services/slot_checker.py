"""
Observation slot eligibility.

Decides, for one station and one of today's synoptic hours, whether the
first card, the second card or neither may be submitted now. Read only:
slots are created by the submission path in obsdesk.services.observations.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from obsdesk.core.errors import ServerError
from obsdesk.crud.observation import observing_time as observing_time_crud
from obsdesk.models.meteorological_entry import MeteorologicalEntry
from obsdesk.utils.logging_config import get_logger
from obsdesk.utils.synoptic_time import ensure_utc, parse_synoptic_hour

logger = get_logger(__name__)

MESSAGE_OPEN = "No observation recorded for this hour yet; first card may be submitted"
MESSAGE_SECOND_PENDING = "First card already submitted; second card may be submitted"
MESSAGE_CLOSED = "Observation for this hour is complete; no further submission allowed"


@dataclass
class SlotDecision:
    """Eligibility answer for one observation slot."""

    allow_first_card: bool
    allow_second_card: bool
    message: str
    time: Optional[datetime] = None
    yesterday_first_stage_entries: List[MeteorologicalEntry] = field(default_factory=list)


def decide_slot(slot_exists: bool, second_stage_count: int) -> Tuple[bool, bool, str]:
    """
    Decision table for a slot.

    Returns:
        Tuple of (allow first card, allow second card, message)
    """
    if not slot_exists:
        return True, False, MESSAGE_OPEN
    if second_stage_count > 0:
        return False, False, MESSAGE_CLOSED
    return False, True, MESSAGE_SECOND_PENDING


async def check_slot(
    db: AsyncSession,
    hour: str,
    station_id: int,
    now: Optional[datetime] = None,
) -> SlotDecision:
    """
    Check which card may be submitted for ``hour`` today at a station.

    Yesterday's first-card entries for the same hour are always returned so
    that the client can pre-fill 24-hour differences.

    Args:
        db: Database session
        hour: Synoptic hour code (00, 03, ... 21)
        station_id: Station ID
        now: Current time, for tests

    Returns:
        SlotDecision

    Raises:
        InvalidInputError: If ``hour`` is not a synoptic hour code
        ServerError: If the database cannot be read
    """
    today_utc = parse_synoptic_hour(hour, now=now)
    yesterday_utc = today_utc - timedelta(hours=24)

    try:
        today = await observing_time_crud.get_slot_with_counts(
            db, station_id=station_id, utc_time=today_utc
        )
        yesterday = await observing_time_crud.get_slot_with_first_stage(
            db, station_id=station_id, utc_time=yesterday_utc
        )
    except SQLAlchemyError as e:
        logger.exception(f"Slot check failed for station {station_id} hour {hour}: {e}")
        raise ServerError("Failed to check time")

    yesterday_entries = list(yesterday.meteorological_entries) if yesterday else []

    if today is None:
        allow_first, allow_second, message = decide_slot(False, 0)
        return SlotDecision(allow_first, allow_second, message, None, yesterday_entries)

    slot, _first_count, second_count = today
    allow_first, allow_second, message = decide_slot(True, second_count)
    return SlotDecision(
        allow_first,
        allow_second,
        message,
        ensure_utc(slot.utc_time),
        yesterday_entries,
    )
