"""
SYNOP code generation.

Encodes one observation slot (its first card and second card) into the 21
code groups of the station's synoptic report.

CODE GROUPS (index -> group -> source):

     0  C1                  constant 1
     1  Iliii               station number
     2  iRiXhvv             32 + low cloud height + visibility
     3  Nddff               total cloud, wind direction and speed (2nd)
     4  1SnTTT              dry bulb
     5  2SnTdTdTd           dew point (Td)
     6  3PPPP/4PPPP         station / sea level pressure
     7  6RRRtR              rainfall during previous period (2nd) + duration code
     8  7wwW1W2             present and past weather
     9  8NhClCmCh           low cloud amount, low/medium/high forms (2nd)
    10  1SnTxTxTx/2SnTnTnTn max/min thermometer (00, 03 UTC: min; 09, 12 UTC: max)
    11  56DlDmDh            low/medium/high cloud directions (2nd)
    12  57CDaEc             first significant layer form, low cloud direction (2nd)
    13  N                   total cloud amount (2nd)
    14  C2                  constant 2
    15  GG                  synoptic hour
    16  58/59P24P24P24      24 hour pressure change
    17  6RRRtR              repeat of group 7
    18  8NsChshs            one segment per significant cloud layer (2nd)
    19  90dqqqt             squall direction and time
    20  91fqfqfq            relative humidity

Temperatures are read in degrees Celsius and coded in tenths with a sign
digit. Missing values code as zeros; generation never raises on bad
observation values.
"""

import math
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from obsdesk.utils.aggregation import parse_number, round_half_up
from obsdesk.utils.synoptic_time import ensure_utc

SYNOP_DATA_TYPE = "SYNOP"
GROUP_COUNT = 21

SYNOPTIC_GROUP_FIELDS = (
    "c1",
    "iliii",
    "irixhvv",
    "nddff",
    "s1nttt",
    "s2ntdtdtd",
    "p3ppp4pppp",
    "rrrtr6",
    "ww_w1w2",
    "nh_cl_cm_ch",
    "s2ntntntn_inininin",
    "d56_dl_dm_dh",
    "cd57_da_ec",
    "avg_total_cloud",
    "c2",
    "gg",
    "p24_group_58_59",
    "r24_group_6_7",
    "ns_ch_hs",
    "dqqqt90",
    "fqfqfq91",
)

# Sixteen-point compass, for wind directions entered as letters
COMPASS_DEGREES = {
    "N": 0, "NNE": 22.5, "NE": 45, "ENE": 67.5,
    "E": 90, "ESE": 112.5, "SE": 135, "SSE": 157.5,
    "S": 180, "SSW": 202.5, "SW": 225, "WSW": 247.5,
    "W": 270, "WNW": 292.5, "NW": 315, "NNW": 337.5,
}


# ============================================================================
# VALUE ENCODING
# ============================================================================

def _value(record, field: str):
    return getattr(record, field, None)


def _text(value, default: str = "0") -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def _whole(value) -> int:
    number = parse_number(value)
    return 0 if number is None else round_half_up(number)


def sign_and_tenths(value) -> str:
    """Sign digit (0 positive, 1 negative) and three digits of tenths: -2.5 -> "1025"."""
    number = parse_number(value) or 0.0
    sign = "0" if number >= 0 else "1"
    return f"{sign}{round_half_up(abs(number) * 10):03d}"


def direction_degrees(value) -> float:
    """Wind direction in degrees from a number or a compass point; 0 when unknown."""
    number = parse_number(value)
    if number is not None:
        return number
    if value is None:
        return 0
    return COMPASS_DEGREES.get(str(value).strip().upper(), 0)


def wind_group(total_cloud, direction, speed) -> str:
    """
    Nddff group.

    dd is the direction in tens of degrees (36 from 355 on, 00 when calm);
    speeds of 100 knots and above add 50 to dd and keep the last two digits.
    """
    knots = _whole(speed)
    if knots <= 0:
        dd = 0
        knots = 0
    else:
        degrees = direction_degrees(direction)
        dd = 36 if degrees >= 355 else math.floor((degrees + 5) / 10)
    if knots >= 100:
        dd += 50
        knots -= 100
    return f"{_text(total_cloud)}{dd:02d}{knots:02d}"


def pressure_digits(value) -> str:
    """Last four digits of a pressure without its decimal point: 1009.6 -> "0096"."""
    text = _text(value, "").replace(".", "")
    if not text:
        return "0000"
    return text[-4:].zfill(4)


def visibility_digits(value) -> str:
    """First digit of the visibility entry, times ten."""
    text = _text(value, "")
    digit = int(text[0]) if text[:1].isdigit() else 0
    return f"{digit * 10:02d}"


def rain_duration_code(
    report_time: datetime,
    start: Optional[datetime],
    end: Optional[datetime],
    intermittent: Optional[bool],
    amount: float,
) -> str:
    """
    tR: when the rain of the six hours before ``report_time`` fell.

    Intermittent rain codes 1 (first three hours), 2 (last three hours) or
    3 (throughout). Continuous rain codes 4-9 from its length and how long
    ago it stopped. "0" means rain without a known time, "/" anything else.
    """
    if start is None or end is None:
        return "0" if amount > 0 else "/"

    report_time = ensure_utc(report_time)
    start = ensure_utc(start)
    end = ensure_utc(end)
    three_before = report_time - timedelta(hours=3)
    six_before = report_time - timedelta(hours=6)

    if intermittent:
        if six_before <= start < three_before and end <= three_before:
            return "1"
        if three_before <= start < report_time and end <= report_time:
            return "2"
        if start <= six_before and end >= report_time:
            return "3"
        return "/"

    if start < six_before or end > report_time:
        return "/"
    duration = (end - start).total_seconds() / 3600
    since_end = (report_time - end).total_seconds() / 3600
    if duration <= 2:
        if since_end <= 2:
            return "4"
        if since_end <= 4:
            return "5"
        if since_end <= 6:
            return "6"
        return "/"
    if duration <= 4:
        if since_end <= 2:
            return "7"
        if since_end <= 4:
            return "8"
        return "/"
    if duration <= 6 and since_end <= 2:
        return "9"
    return "/"


def precipitation_group(report_time: datetime, second) -> str:
    """6RRRtR: whole millimetres (last three digits) and the duration code."""
    amount = parse_number(_value(second, "rainfall_during_previous")) or 0.0
    rrr = str(max(round_half_up(amount), 0))[-3:].zfill(3)
    tr = rain_duration_code(
        report_time,
        _value(second, "rainfall_time_start"),
        _value(second, "rainfall_time_end"),
        _value(second, "is_intermittent_rain"),
        amount,
    )
    return f"6{rrr}{tr}"


def extreme_temperature_group(hour: str, value) -> str:
    """Minimum temperature group at 00/03 UTC, maximum at 09/12 UTC, else empty."""
    if hour in ("00", "03"):
        indicator = "2"
    elif hour in ("09", "12"):
        indicator = "1"
    else:
        return ""
    return f"{indicator}{sign_and_tenths(value)}"


def pressure_change_group(value) -> str:
    """58 for a rise (or no change), 59 for a fall, then tenths of hPa."""
    number = parse_number(value) or 0.0
    indicator = "58" if number >= 0 else "59"
    return f"{indicator}{round_half_up(abs(number) * 10) % 1000:03d}"


def significant_cloud_groups(second) -> str:
    """8NsChshs for every significant cloud layer with any value, joined by " / "."""
    segments: List[str] = []
    for layer in range(1, 5):
        amount = _value(second, f"layer{layer}_amount")
        form = _value(second, f"layer{layer}_form")
        height = _value(second, f"layer{layer}_height")
        if not (amount or form or height):
            continue
        segments.append(f"8{_text(amount)}{_text(form)}{max(_whole(height), 0):02d}")
    return " / ".join(segments)


# ============================================================================
# REPORT
# ============================================================================

def generate_synoptic_code(station_no: str, utc_time: datetime, first, second) -> Dict:
    """
    Build the synoptic report of one observation slot.

    Args:
        station_no: WMO station index (Iliii)
        utc_time: The slot's synoptic hour
        first: First-card entry (MeteorologicalEntry or any object with its fields)
        second: Second-card entry (WeatherObservation or alike)

    Returns:
        {"data_type": "SYNOP", "station_no", "year", "month", "day",
         "weather_remark", "measurements": [21 strings]}
    """
    report_time = ensure_utc(utc_time)
    hour = f"{report_time.hour:02d}"
    total_cloud = _text(_value(second, "total_cloud_amount"))
    low_direction = _text(_value(second, "low_cloud_direction"))

    groups = [""] * GROUP_COUNT
    groups[0] = "1"
    groups[1] = station_no
    groups[2] = (
        f"32{_text(_value(second, 'low_cloud_height'))}"
        f"{visibility_digits(_value(first, 'horizontal_visibility'))}"
    )
    groups[3] = wind_group(total_cloud, _value(second, "wind_direction"), _value(second, "wind_speed"))
    groups[4] = f"1{sign_and_tenths(_value(first, 'dry_bulb_as_read'))}"
    groups[5] = f"2{sign_and_tenths(_value(first, 'dew_point_temperature'))}"
    groups[6] = (
        f"3{pressure_digits(_value(first, 'station_level_pressure'))}"
        f"/4{pressure_digits(_value(first, 'corrected_sea_level_pressure'))}"
    )
    groups[7] = precipitation_group(report_time, second)
    groups[8] = (
        f"7{_text(_value(first, 'present_weather_ww'), '00')}"
        f"{_text(_value(first, 'past_weather_w1'))}{_text(_value(first, 'past_weather_w2'))}"
    )
    groups[9] = (
        f"8{_text(_value(second, 'low_cloud_amount'))}{_text(_value(second, 'low_cloud_form'))}"
        f"{_text(_value(second, 'medium_cloud_form'))}{_text(_value(second, 'high_cloud_form'))}"
    )
    groups[10] = extreme_temperature_group(hour, _value(first, "max_min_temp_as_read"))
    groups[11] = (
        f"56{low_direction}{_text(_value(second, 'medium_cloud_direction'))}"
        f"{_text(_value(second, 'high_cloud_direction'))}"
    )
    layer_form = _text(_value(second, "layer1_form"))
    groups[12] = f"57{layer_form}{low_direction}{layer_form}"
    groups[13] = total_cloud
    groups[14] = "2"
    groups[15] = hour
    groups[16] = pressure_change_group(_value(first, "pressure_change_24h"))
    groups[17] = groups[7]
    groups[18] = significant_cloud_groups(second)
    groups[19] = f"90{_text(_value(first, 'squall_direction'), '')}0{_text(_value(first, 'squall_time'), '')}"
    groups[20] = f"91{max(_whole(_value(first, 'relative_humidity')), 0):03d}"

    return {
        "data_type": SYNOP_DATA_TYPE,
        "station_no": station_no,
        "year": f"{report_time.year:04d}",
        "month": f"{report_time.month:02d}",
        "day": f"{report_time.day:02d}",
        "weather_remark": _text(_value(second, "observer_initial"), ""),
        "measurements": groups,
    }
