"""
Synoptic observation time helpers.

Stations report at eight fixed UTC hours. Every observation slot is stored
under a timezone-aware UTC timestamp for *today* at one of those hours, so
the helpers here are the only place hour codes are turned into timestamps
and back.
"""

import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple, Union

from obsdesk.config import settings
from obsdesk.core.errors import InvalidInputError

SYNOPTIC_HOURS = ("00", "03", "06", "09", "12", "15", "18", "21")

_HOUR_CODE = re.compile(r"^\d{1,2}$")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Return ``value`` as an aware UTC datetime.

    SQLite hands back naive datetimes for timezone-aware columns; those are
    always UTC in this application.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def hour_to_utc(code: str, now: Optional[datetime] = None) -> datetime:
    """
    Convert an hour code to today's UTC timestamp at that hour.

    Example:
        >>> hour_to_utc("12")  # on 2025-05-19
        datetime(2025, 5, 19, 12, 0, tzinfo=timezone.utc)

    Raises:
        InvalidInputError: if the code is not an integer hour between 0 and 23
    """
    code = str(code).strip() if code is not None else ""
    if not _HOUR_CODE.match(code):
        raise InvalidInputError(f"Invalid hour code: {code!r}")

    hour = int(code)
    if hour > 23:
        raise InvalidInputError(f"Invalid hour code: {code!r}")

    today = ensure_utc(now or utc_now()).date()
    return datetime(today.year, today.month, today.day, hour, tzinfo=timezone.utc)


def utc_to_hour(value: Union[datetime, str]) -> str:
    """
    Convert a UTC timestamp (or ISO string) back to its two-digit hour code.

    Exact inverse of :func:`hour_to_utc`.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return f"{ensure_utc(value).hour:02d}"


def parse_synoptic_hour(code: str, now: Optional[datetime] = None) -> datetime:
    """
    Resolve one of the eight synoptic hour codes to today's UTC timestamp.

    Raises:
        InvalidInputError: for any code outside SYNOPTIC_HOURS
    """
    if code not in SYNOPTIC_HOURS:
        raise InvalidInputError(
            f"Invalid observation hour {code!r}; expected one of {', '.join(SYNOPTIC_HOURS)}"
        )
    return hour_to_utc(code, now=now)


def day_utc_range(day: date) -> Tuple[datetime, datetime]:
    """Inclusive start and end of a UTC calendar day."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    end = datetime.combine(day, time.max, tzinfo=timezone.utc)
    return start, end


def today_utc_range(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Inclusive start and end of the current UTC day."""
    return day_utc_range(ensure_utc(now or utc_now()).date())


def utc_to_local(value: datetime) -> datetime:
    """Station local wall time for a UTC timestamp."""
    offset = timezone(timedelta(hours=settings.STATION_UTC_OFFSET_HOURS))
    return ensure_utc(value).astimezone(offset)
