"""
First-card and second-card observation schemas.

Readings are carried as text (see ``Reading``); the daily aggregator
decides which of them parse as numbers.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from obsdesk.schemas.base import BaseSchema, IDSchema, Reading, ShortReading, reading_field

RemarkReading = reading_field(100)


class FirstCardCreate(BaseModel):
    """First-card (meteorological entry) submission."""
    hour: str = Field(..., description="Synoptic hour code: 00, 03, ... 21")
    data_type: ShortReading = ""

    sub_indicator: Reading = ""
    altered_thermometer: Reading = ""
    bar_as_read: Reading = ""
    corrected_for_index: Reading = ""
    height_difference: Reading = ""
    correction_for_temp: Reading = ""
    station_level_pressure: Reading = ""
    sea_level_reduction: Reading = ""
    corrected_sea_level_pressure: Reading = ""
    afternoon_reading: Reading = ""
    pressure_change_24h: Reading = ""

    dry_bulb_as_read: Reading = ""
    wet_bulb_as_read: Reading = ""
    max_min_temp_as_read: Reading = ""
    dry_bulb_corrected: Reading = ""
    wet_bulb_corrected: Reading = ""
    max_min_temp_corrected: Reading = ""

    dew_point_temperature: Reading = ""
    relative_humidity: Reading = ""

    squall_confirmed: ShortReading = ""
    squall_force: Reading = ""
    squall_direction: Reading = ""
    squall_time: Reading = ""

    horizontal_visibility: Reading = ""
    misc_meteors: RemarkReading = ""
    past_weather_w1: ShortReading = ""
    past_weather_w2: ShortReading = ""
    present_weather_ww: ShortReading = ""
    c2_indicator: ShortReading = ""

    def entry_fields(self) -> dict:
        """Column values for the MeteorologicalEntry row ("" for missing)."""
        data = self.model_dump(exclude={"hour"})
        return {key: value or "" for key, value in data.items()}


class CloudLevel(BaseModel):
    form: Reading = None
    height: Reading = None
    amount: Reading = None
    direction: Reading = None


class Clouds(BaseModel):
    low: CloudLevel = Field(default_factory=CloudLevel)
    medium: CloudLevel = Field(default_factory=CloudLevel)
    high: CloudLevel = Field(default_factory=CloudLevel)


class CloudLayer(BaseModel):
    form: Reading = None
    height: Reading = None
    amount: Reading = None


class Rainfall(BaseModel):
    """
    Rainfall section of the second card.

    Start and end arrive as separate date (YYYY-MM-DD) and time (HH:MM)
    strings and are combined into UTC datetimes.
    """
    date_start: Optional[str] = None
    time_start: Optional[str] = None
    date_end: Optional[str] = None
    time_end: Optional[str] = None
    since_previous: Reading = None
    during_previous: Reading = None
    last_24_hours: Reading = None
    is_intermittent_rain: Optional[bool] = None


class Wind(BaseModel):
    first_anemometer: Reading = None
    second_anemometer: Reading = None
    speed: Reading = None
    direction: Reading = None


class SecondCardCreate(BaseModel):
    """Second-card (weather observation) submission."""
    hour: str = Field(..., description="Synoptic hour code: 00, 03, ... 21")
    observer_initial: Reading = None
    clouds: Clouds = Field(default_factory=Clouds)
    total_cloud_amount: Reading = None
    significant_clouds: List[CloudLayer] = Field(default_factory=list, max_length=4)
    rainfall: Rainfall = Field(default_factory=Rainfall)
    wind: Wind = Field(default_factory=Wind)


class MeteorologicalEntry(IDSchema):
    """Stored first-card entry."""
    observing_time_id: int
    data_type: Optional[str] = None
    sub_indicator: Optional[str] = None
    altered_thermometer: Optional[str] = None
    bar_as_read: Optional[str] = None
    corrected_for_index: Optional[str] = None
    height_difference: Optional[str] = None
    correction_for_temp: Optional[str] = None
    station_level_pressure: Optional[str] = None
    sea_level_reduction: Optional[str] = None
    corrected_sea_level_pressure: Optional[str] = None
    afternoon_reading: Optional[str] = None
    pressure_change_24h: Optional[str] = None
    dry_bulb_as_read: Optional[str] = None
    wet_bulb_as_read: Optional[str] = None
    max_min_temp_as_read: Optional[str] = None
    dry_bulb_corrected: Optional[str] = None
    wet_bulb_corrected: Optional[str] = None
    max_min_temp_corrected: Optional[str] = None
    dew_point_temperature: Optional[str] = None
    relative_humidity: Optional[str] = None
    squall_confirmed: Optional[str] = None
    squall_force: Optional[str] = None
    squall_direction: Optional[str] = None
    squall_time: Optional[str] = None
    horizontal_visibility: Optional[str] = None
    misc_meteors: Optional[str] = None
    past_weather_w1: Optional[str] = None
    past_weather_w2: Optional[str] = None
    present_weather_ww: Optional[str] = None
    c2_indicator: Optional[str] = None
    submitted_at: datetime


class WeatherObservation(IDSchema):
    """Stored second-card entry."""
    observing_time_id: int
    observer_initial: Optional[str] = None
    card_indicator: Optional[str] = None
    low_cloud_form: Optional[str] = None
    low_cloud_height: Optional[str] = None
    low_cloud_amount: Optional[str] = None
    low_cloud_direction: Optional[str] = None
    medium_cloud_form: Optional[str] = None
    medium_cloud_height: Optional[str] = None
    medium_cloud_amount: Optional[str] = None
    medium_cloud_direction: Optional[str] = None
    high_cloud_form: Optional[str] = None
    high_cloud_height: Optional[str] = None
    high_cloud_amount: Optional[str] = None
    high_cloud_direction: Optional[str] = None
    total_cloud_amount: Optional[str] = None
    layer1_form: Optional[str] = None
    layer1_height: Optional[str] = None
    layer1_amount: Optional[str] = None
    layer2_form: Optional[str] = None
    layer2_height: Optional[str] = None
    layer2_amount: Optional[str] = None
    layer3_form: Optional[str] = None
    layer3_height: Optional[str] = None
    layer3_amount: Optional[str] = None
    layer4_form: Optional[str] = None
    layer4_height: Optional[str] = None
    layer4_amount: Optional[str] = None
    rainfall_time_start: Optional[datetime] = None
    rainfall_time_end: Optional[datetime] = None
    rainfall_since_previous: Optional[str] = None
    rainfall_during_previous: Optional[str] = None
    rainfall_last_24_hours: Optional[str] = None
    is_intermittent_rain: Optional[bool] = None
    wind_first_anemometer: Optional[str] = None
    wind_second_anemometer: Optional[str] = None
    wind_speed: Optional[str] = None
    wind_direction: Optional[str] = None
    submitted_at: datetime


class ObservingTime(IDSchema):
    """Observation slot with its attached entries."""
    station_id: int
    user_id: Optional[int] = None
    utc_time: datetime
    local_time: datetime
    meteorological_entries: List[MeteorologicalEntry] = []
    weather_observations: List[WeatherObservation] = []


class SubmissionResponse(BaseModel):
    """Result of a first- or second-card submission."""
    message: str
    observing_time_id: int
    utc_time: datetime
    entry_id: int
