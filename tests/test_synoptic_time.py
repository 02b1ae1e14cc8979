"""
Tests for the synoptic hour helpers.
"""

from datetime import date, datetime, timezone

import pytest

from obsdesk.core.errors import InvalidInputError
from obsdesk.utils.synoptic_time import (
    SYNOPTIC_HOURS,
    day_utc_range,
    ensure_utc,
    hour_to_utc,
    parse_synoptic_hour,
    today_utc_range,
    utc_to_hour,
    utc_to_local,
)

NOW = datetime(2025, 5, 19, 14, 37, tzinfo=timezone.utc)


def test_hour_to_utc_uses_today_at_the_hour():
    """An hour code maps to today's date at that UTC hour."""
    assert hour_to_utc("12", now=NOW) == datetime(2025, 5, 19, 12, 0, tzinfo=timezone.utc)
    assert hour_to_utc("0", now=NOW) == datetime(2025, 5, 19, 0, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("hour", range(24))
def test_every_hour_round_trips(hour):
    """utc_to_hour is the exact inverse of hour_to_utc."""
    code = f"{hour:02d}"
    assert utc_to_hour(hour_to_utc(code, now=NOW)) == code


@pytest.mark.parametrize("code", ["24", "99", "-1", "ab", "", "1.5", "123", None])
def test_hour_to_utc_rejects_bad_codes(code):
    with pytest.raises(InvalidInputError):
        hour_to_utc(code, now=NOW)


def test_utc_to_hour_accepts_iso_strings():
    assert utc_to_hour("2025-05-19T21:00:00Z") == "21"
    assert utc_to_hour("2025-05-19T03:00:00+00:00") == "03"


def test_parse_synoptic_hour_accepts_only_the_eight_hours():
    """Only 00, 03, ... 21 are observation hours."""
    for code in SYNOPTIC_HOURS:
        assert utc_to_hour(parse_synoptic_hour(code, now=NOW)) == code

    for code in ("01", "13", "3", "24", "xx"):
        with pytest.raises(InvalidInputError):
            parse_synoptic_hour(code, now=NOW)


def test_day_ranges_are_inclusive():
    start, end = day_utc_range(date(2025, 5, 19))
    assert start == datetime(2025, 5, 19, 0, 0, tzinfo=timezone.utc)
    assert end.date() == date(2025, 5, 19)
    assert end.hour == 23 and end.minute == 59

    assert today_utc_range(now=NOW) == (start, end)


def test_ensure_utc_treats_naive_values_as_utc():
    naive = datetime(2025, 5, 19, 12, 0)
    assert ensure_utc(naive) == datetime(2025, 5, 19, 12, 0, tzinfo=timezone.utc)
    assert ensure_utc(None) is None


def test_utc_to_local_applies_station_offset():
    local = utc_to_local(datetime(2025, 5, 19, 21, 0, tzinfo=timezone.utc))
    # Default station offset is +6 hours
    assert local.utcoffset().total_seconds() == 6 * 3600
    assert (local.year, local.month, local.day, local.hour) == (2025, 5, 20, 3)
