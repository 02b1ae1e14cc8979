"""
Tests for the daily summary aggregation.
"""

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from obsdesk.utils.aggregation import (
    MEASUREMENT_COUNT,
    aggregate_daily_summary,
    compute_measurements,
    format_decimal,
    format_duration,
    most_frequent,
    parse_number,
    rain_duration_minutes,
    round_half_up,
)


def first(**values):
    return SimpleNamespace(**values)


def second(**values):
    return SimpleNamespace(**values)


def slot(first_stage=(), second_stage=()):
    return SimpleNamespace(
        meteorological_entries=list(first_stage),
        weather_observations=list(second_stage),
    )


def test_empty_day_has_sixteen_blank_measurements():
    result = aggregate_daily_summary([], date(2025, 5, 19), "41923")
    assert result["measurements"] == [""] * MEASUREMENT_COUNT
    assert result["station_no"] == "41923"
    assert result["data_type"] == "SY"
    assert (result["year"], result["month"], result["day"]) == ("2025", "05", "19")


def test_mean_pressure_rounds_half_up():
    """1011.0 and 1012.0 average to 1011.5, printed as 1012."""
    result = aggregate_daily_summary(
        [
            slot([first(station_level_pressure="1011.0")]),
            slot([first(station_level_pressure="1012.0")]),
        ],
        "2025-05-19",
        "41923",
    )
    assert result["measurements"][0] == "1012"


def test_mean_pressure_skips_malformed_reading():
    result = aggregate_daily_summary(
        [
            slot([first(station_level_pressure="1010.2")]),
            slot([first(station_level_pressure="1012.8")]),
            slot([first(station_level_pressure="bad")]),
        ],
        "2025-05-19",
        "41923",
    )
    assert result["measurements"][0] == "1012"


def test_strongest_of_two_winds():
    result = aggregate_daily_summary(
        [
            slot(second_stage=[second(wind_speed="12", wind_direction="NE")]),
            slot(second_stage=[second(wind_speed="18", wind_direction="SW")]),
        ],
        "2025-05-19",
        "41923",
    )
    measurements = result["measurements"]
    assert measurements[9] == "15"
    assert measurements[11] == "18"
    assert measurements[12] == "SW"


def test_wind_speed_and_prevailing_direction():
    """Mean speed, most frequent direction and the strongest wind with its direction."""
    result = aggregate_daily_summary(
        [
            slot(second_stage=[second(wind_speed="10", wind_direction="NE")]),
            slot(second_stage=[second(wind_speed="18", wind_direction="SW")]),
            slot(second_stage=[second(wind_speed="14", wind_direction="SW")]),
        ],
        date(2025, 5, 19),
        "41923",
    )
    measurements = result["measurements"]
    assert measurements[9] == "14"
    assert measurements[10] == "SW"
    assert measurements[11] == "18"
    assert measurements[12] == "SW"


def test_rain_across_midnight_counts_forward():
    """Rain from 23:30 to 00:15 lasted 45 minutes."""
    result = aggregate_daily_summary(
        [
            slot(second_stage=[
                second(
                    rainfall_time_start=datetime(2025, 5, 19, 23, 30),
                    rainfall_time_end=datetime(2025, 5, 19, 0, 15),
                )
            ])
        ],
        date(2025, 5, 19),
        "41923",
    )
    assert result["measurements"][15] == "0045"


def test_rain_durations_are_summed():
    measurements = compute_measurements(
        [],
        [
            second(rainfall_time_start="06:00", rainfall_time_end="07:30"),
            second(rainfall_time_start="2025-05-19T12:00:00", rainfall_time_end="2025-05-19T12:45:00"),
            second(rainfall_time_start="bad", rainfall_time_end="13:00"),
        ],
    )
    assert measurements[15] == "0215"


def test_malformed_values_are_left_out():
    measurements = compute_measurements(
        [
            first(dry_bulb_as_read="25.4", horizontal_visibility="abc"),
            first(dry_bulb_as_read="", horizontal_visibility="8"),
            first(dry_bulb_as_read="n/a", horizontal_visibility="4"),
        ],
        [second(total_cloud_amount=None, rainfall_last_24_hours="x")],
    )
    assert measurements[2] == "25"
    assert measurements[14] == "4"
    assert measurements[6] == ""
    assert measurements[13] == ""


def test_temperature_extremes_and_humidity():
    measurements = compute_measurements(
        [
            first(max_min_temp_as_read="31.6", dew_point_temperature="22", relative_humidity="80"),
            first(max_min_temp_as_read="24.2", dew_point_temperature="23", relative_humidity="85"),
        ],
        [],
    )
    assert measurements[4] == "32"
    assert measurements[5] == "24"
    assert measurements[7] == "23"
    assert measurements[8] == "83"


def test_precipitation_keeps_fractions():
    measurements = compute_measurements(
        [],
        [second(rainfall_last_24_hours="10.25"), second(rainfall_last_24_hours="2.25")],
    )
    assert measurements[6] == "12.5"


def test_direction_tie_goes_to_first_seen():
    assert most_frequent(["NE", "SW", "SW", "NE"]) == "NE"
    assert most_frequent([]) is None


def test_strongest_wind_tie_keeps_first_record():
    measurements = compute_measurements(
        [],
        [
            second(wind_speed="20", wind_direction="N"),
            second(wind_speed="20", wind_direction="S"),
        ],
    )
    assert measurements[11] == "20"
    assert measurements[12] == "N"


def test_result_does_not_depend_on_slot_order():
    slots = [
        slot([first(station_level_pressure="1008", relative_humidity="70")],
             [second(wind_speed="5", wind_direction="E", total_cloud_amount="6")]),
        slot([first(station_level_pressure="1010", relative_humidity="90")],
             [second(wind_speed="9", wind_direction="W", total_cloud_amount="2")]),
    ]
    forward = aggregate_daily_summary(slots, date(2025, 5, 19), "41923")
    backward = aggregate_daily_summary(list(reversed(slots)), date(2025, 5, 19), "41923")
    # Only the direction tie-break depends on order
    for index in range(MEASUREMENT_COUNT):
        if index != 10:
            assert forward["measurements"][index] == backward["measurements"][index]


def test_invalid_date_raises():
    with pytest.raises(ValueError):
        aggregate_daily_summary([], "2025-13-40", "41923")
    with pytest.raises(ValueError):
        aggregate_daily_summary([], 20250519, "41923")


@pytest.mark.parametrize(
    "value, expected",
    [("12.5", 12.5), (" 7 ", 7.0), ("", None), (None, None), ("nan", None), ("inf", None), (True, None), ("x", None)],
)
def test_parse_number(value, expected):
    assert parse_number(value) == expected


def test_number_formatting_helpers():
    assert round_half_up(1011.5) == 1012
    assert round_half_up(-0.5) == 0
    assert format_decimal(12.0) == "12"
    assert format_decimal(12.50) == "12.5"
    assert format_duration(45) == "0045"
    assert format_duration(1500) == "2500"
    assert rain_duration_minutes(None, "10:00") is None
