"""
Daily synoptic summary aggregation.

Turns every first-card (instrument reading) and second-card (weather
observation) entry recorded for a station on one UTC day into the fixed
16-slot measurement vector of the daily summary form.

AGGREGATION RULES (slot -> source -> reducer):

     0  station level pressure          mean
     1  corrected sea level pressure    mean
     2  dry bulb as read                mean
     3  wet bulb as read                mean
     4  max/min thermometer as read     max
     5  max/min thermometer as read     min
     6  rainfall last 24 hours (2nd)    sum
     7  dew point (Td)                  mean
     8  relative humidity               mean
     9  wind speed (2nd)                mean
    10  wind direction (2nd)            most frequent
    11  wind speed (2nd)                maximum
    12  wind direction (2nd)            direction of slot 11's record
    13  total cloud amount (2nd)        mean
    14  horizontal visibility           min
    15  rain start/end (2nd)            summed duration, HHMM

Values that do not parse as numbers are left out of their reducer. A slot
whose reducer receives nothing stays "" (no data). Aggregation never raises
on bad observation values; only a malformed date is an error.
"""

import math
from datetime import date, datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

SUMMARY_DATA_TYPE = "SY"
MEASUREMENT_COUNT = 16
MINUTES_PER_DAY = 1440

MEASUREMENT_FIELDS = (
    "av_station_pressure",
    "av_sea_level_pressure",
    "av_dry_bulb_temperature",
    "av_wet_bulb_temperature",
    "max_temperature",
    "min_temperature",
    "total_precipitation",
    "av_dew_point_temperature",
    "av_relative_humidity",
    "wind_speed",
    "wind_direction_code",
    "max_wind_speed",
    "max_wind_direction",
    "av_total_cloud",
    "lowest_visibility",
    "total_rain_duration",
)


# ============================================================================
# VALUE PARSING
# ============================================================================

def parse_number(value) -> Optional[float]:
    """
    Parse an observation value as a float.

    Returns None for missing, blank, non-numeric, NaN or infinite values.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return math.floor(value + 0.5)


def format_decimal(value: float) -> str:
    """Plain decimal string without trailing zeros (12.0 -> "12", 12.50 -> "12.5")."""
    text = f"{round(value, 2):.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _parse_rain_time(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            try:
                parsed = datetime.strptime(text, "%H:%M")
            except ValueError:
                return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def rain_duration_minutes(start, end) -> Optional[float]:
    """
    Minutes of rain between ``start`` and ``end``.

    A negative span means the rain crossed midnight, so a full day is added.
    Returns None when either side is missing or unparseable.
    """
    start_dt = _parse_rain_time(start)
    end_dt = _parse_rain_time(end)
    if start_dt is None or end_dt is None:
        return None

    minutes = (end_dt - start_dt).total_seconds() / 60
    if minutes < 0:
        minutes += MINUTES_PER_DAY
    return minutes


def format_duration(total_minutes: float) -> str:
    """Format minutes as zero-padded HHMM (e.g. 45 -> "0045", 135 -> "0215")."""
    total = int(math.floor(total_minutes))
    hours, minutes = divmod(total, 60)
    return f"{hours:02d}{minutes:02d}"


def coerce_date(day: Union[date, datetime, str]) -> date:
    """
    Accept a date, datetime or YYYY-MM-DD string.

    Raises:
        ValueError: for anything that is not a valid calendar date
    """
    if isinstance(day, datetime):
        return day.date()
    if isinstance(day, date):
        return day
    if isinstance(day, str):
        return date.fromisoformat(day.strip()[:10])
    raise ValueError(f"Invalid summary date: {day!r}")


# ============================================================================
# REDUCERS
# ============================================================================

def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def most_frequent(values: Iterable[str]) -> Optional[str]:
    """
    Most frequent value; ties go to the value seen first.

    Example:
        >>> most_frequent(["NE", "SW", "SW", "NE"])
        'NE'
    """
    counts: Dict[str, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1

    best, best_count = None, 0
    for value, count in counts.items():
        if count > best_count:
            best, best_count = value, count
    return best


def _numbers(records: Iterable, field: str) -> List[float]:
    parsed = (parse_number(getattr(record, field, None)) for record in records)
    return [value for value in parsed if value is not None]


def _rounded(records: Iterable, field: str, reducer: Callable[[Sequence[float]], float]) -> str:
    values = _numbers(records, field)
    if not values:
        return ""
    return str(round_half_up(reducer(values)))


# ============================================================================
# DAILY SUMMARY
# ============================================================================

def flatten_entries(observing_times: Iterable):
    """
    Split a day's observing times into first-card and second-card entries.

    The schema links entries to an observing time by foreign key only, so an
    observing time may carry any number of each kind.
    """
    first_stage, second_stage = [], []
    for observing_time in observing_times:
        first_stage.extend(getattr(observing_time, "meteorological_entries", None) or [])
        second_stage.extend(getattr(observing_time, "weather_observations", None) or [])
    return first_stage, second_stage


def compute_measurements(first_stage: Sequence, second_stage: Sequence) -> List[str]:
    """
    Compute the 16 summary measurements from flattened entries.

    Args:
        first_stage: meteorological (first card) entries
        second_stage: weather observation (second card) entries

    Returns:
        List of 16 strings, "" where there was no usable data
    """
    measurements = [""] * MEASUREMENT_COUNT

    # Pressure and temperature
    measurements[0] = _rounded(first_stage, "station_level_pressure", _mean)
    measurements[1] = _rounded(first_stage, "corrected_sea_level_pressure", _mean)
    measurements[2] = _rounded(first_stage, "dry_bulb_as_read", _mean)
    measurements[3] = _rounded(first_stage, "wet_bulb_as_read", _mean)
    measurements[4] = _rounded(first_stage, "max_min_temp_as_read", max)
    measurements[5] = _rounded(first_stage, "max_min_temp_as_read", min)

    # Precipitation: SUM
    rainfall = _numbers(second_stage, "rainfall_last_24_hours")
    if rainfall:
        measurements[6] = format_decimal(sum(rainfall))

    # Humidity
    measurements[7] = _rounded(first_stage, "dew_point_temperature", _mean)
    measurements[8] = _rounded(first_stage, "relative_humidity", _mean)

    # Wind
    measurements[9] = _rounded(second_stage, "wind_speed", _mean)

    directions = [
        str(record.wind_direction).strip()
        for record in second_stage
        if getattr(record, "wind_direction", None) not in (None, "")
    ]
    prevailing = most_frequent(d for d in directions if d)
    if prevailing is not None:
        measurements[10] = prevailing

    strongest = None
    for record in second_stage:
        speed = parse_number(getattr(record, "wind_speed", None))
        if speed is None:
            continue
        if strongest is None or speed > strongest[0]:
            strongest = (speed, getattr(record, "wind_direction", None))
    if strongest is not None:
        measurements[11] = str(round_half_up(strongest[0]))
        measurements[12] = "" if strongest[1] is None else str(strongest[1])

    # Cloud and visibility
    measurements[13] = _rounded(second_stage, "total_cloud_amount", _mean)
    measurements[14] = _rounded(first_stage, "horizontal_visibility", min)

    # Rain duration
    durations = [
        rain_duration_minutes(
            getattr(record, "rainfall_time_start", None),
            getattr(record, "rainfall_time_end", None),
        )
        for record in second_stage
    ]
    durations = [minutes for minutes in durations if minutes is not None]
    if durations:
        measurements[15] = format_duration(sum(durations))

    return measurements


def aggregate_daily_summary(
    observing_times: Iterable,
    day: Union[date, datetime, str],
    station_no: str,
) -> Dict:
    """
    Build the daily summary for one station and one UTC day.

    Args:
        observing_times: the day's observing times, each with its
            ``meteorological_entries`` and ``weather_observations`` loaded
        day: summary date
        station_no: station number printed on the summary

    Returns:
        Dictionary with the 16 measurements and the summary header

    Raises:
        ValueError: if ``day`` is not a valid date
    """
    summary_date = coerce_date(day)
    first_stage, second_stage = flatten_entries(observing_times)

    return {
        "measurements": compute_measurements(first_stage, second_stage),
        "station_no": station_no,
        "data_type": SUMMARY_DATA_TYPE,
        "year": f"{summary_date.year:04d}",
        "month": f"{summary_date.month:02d}",
        "day": f"{summary_date.day:02d}",
    }
