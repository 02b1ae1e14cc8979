"""
Pydantic schemas for agroclimatological data.

Sunshine duration, soil moisture readings and the daily
agroclimatological form.
"""

from datetime import date as DateType
from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import BeforeValidator, Field

from obsdesk.schemas.base import BaseSchema, IDSchema, TimestampSchema


class SunshineCreate(BaseSchema):
    """Hourly sunshine for one day; replaces any record for the same date."""
    date: DateType
    hours: List[float] = Field(..., min_length=24, max_length=24, description="Sunshine per clock hour (0-1)")
    total: float = Field(..., ge=0, le=24, description="Total sunshine hours")
    station_id: Optional[int] = Field(None, description="Target station (super admin only)")


class Sunshine(IDSchema, TimestampSchema):
    station_id: int
    user_id: Optional[int] = None
    date: DateType
    hours: List[float]
    total: float


class SoilMoistureCreate(BaseSchema):
    """Gravimetric soil moisture reading."""
    date: DateType
    depth: int = Field(..., gt=0, description="Sample depth (cm)")
    w1: Optional[float] = None
    w2: Optional[float] = None
    w3: Optional[float] = None
    ws: Optional[float] = None
    ds: Optional[float] = None
    sm: Optional[float] = None
    station_id: Optional[int] = Field(None, description="Target station (super admin only)")


class SoilMoisture(IDSchema, TimestampSchema):
    station_id: int
    user_id: Optional[int] = None
    date: DateType
    depth: int
    w1: Optional[float] = None
    w2: Optional[float] = None
    w3: Optional[float] = None
    ws: Optional[float] = None
    ds: Optional[float] = None
    sm: Optional[float] = None


def _blank_to_none(value: Any) -> Any:
    # Form fields left empty arrive as ""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def measurement(**constraints) -> Any:
    """An optional number; blank input reads as missing."""
    return Annotated[Optional[Annotated[float, Field(**constraints)]], BeforeValidator(_blank_to_none)]


Measurement = measurement()
SunshineHours = measurement(ge=0, le=24)
Percentage = measurement(ge=0, le=100)


class StationInfo(BaseSchema):
    date: DateType
    elevation: Measurement = None


class AirTemperature(BaseSchema):
    """Dry and wet bulb at 0.5, 1.2 and 2.2 m (°C)."""
    dry_05m: Measurement = None
    wet_05m: Measurement = None
    dry_12m: Measurement = None
    wet_12m: Measurement = None
    dry_22m: Measurement = None
    wet_22m: Measurement = None


class SoilTemperature(BaseSchema):
    depth_5cm: Measurement = None
    depth_10cm: Measurement = None
    depth_20cm: Measurement = None
    depth_30cm: Measurement = None
    depth_50cm: Measurement = None


class SoilMoistureLayers(BaseSchema):
    depth_0_to_20cm: Measurement = None
    depth_20_to_50cm: Measurement = None


class AgroclimatologicalCreate(BaseSchema):
    """Daily agroclimatological form; one per station and date."""
    station_info: StationInfo
    solar_radiation: Measurement = None
    sunshine_hours: SunshineHours = None
    air_temperature: AirTemperature = Field(default_factory=AirTemperature)
    min_temp: Measurement = None
    max_temp: Measurement = None
    mean_temp: Measurement = None
    grass_min_temp: Measurement = None
    soil_temperature: SoilTemperature = Field(default_factory=SoilTemperature)
    soil_moisture: SoilMoistureLayers = Field(default_factory=SoilMoistureLayers)
    pan_water_evap: Measurement = None
    relative_humidity: Percentage = None
    evaporation: Measurement = None
    dew_point: Measurement = None
    wind_speed: Measurement = None
    duration: Measurement = None
    rainfall: Measurement = None
    station_id: Optional[int] = Field(None, description="Target station (super admin only)")

    def record_fields(self) -> dict:
        """Column values for the AgroclimatologicalRecord row."""
        air = self.air_temperature
        soil = self.soil_temperature
        return {
            "date": self.station_info.date,
            "elevation": self.station_info.elevation or 0,
            "solar_radiation": self.solar_radiation,
            "sunshine_hours": self.sunshine_hours,
            "air_temp_dry_05m": air.dry_05m,
            "air_temp_wet_05m": air.wet_05m,
            "air_temp_dry_12m": air.dry_12m,
            "air_temp_wet_12m": air.wet_12m,
            "air_temp_dry_22m": air.dry_22m,
            "air_temp_wet_22m": air.wet_22m,
            "min_temp": self.min_temp,
            "max_temp": self.max_temp,
            "mean_temp": self.mean_temp,
            "grass_min_temp": self.grass_min_temp,
            "soil_temp_5cm": soil.depth_5cm,
            "soil_temp_10cm": soil.depth_10cm,
            "soil_temp_20cm": soil.depth_20cm,
            "soil_temp_30cm": soil.depth_30cm,
            "soil_temp_50cm": soil.depth_50cm,
            "soil_moisture_0_20cm": self.soil_moisture.depth_0_to_20cm,
            "soil_moisture_20_50cm": self.soil_moisture.depth_20_to_50cm,
            "pan_water_evap": self.pan_water_evap,
            "relative_humidity": self.relative_humidity,
            "evaporation": self.evaporation,
            "dew_point": self.dew_point,
            "wind_speed": self.wind_speed,
            "duration": self.duration,
            "rainfall": self.rainfall,
        }


class Agroclimatological(IDSchema, TimestampSchema):
    station_id: int
    user_id: Optional[int] = None
    date: DateType
    utc_time: datetime
    elevation: float
    solar_radiation: Optional[float] = None
    sunshine_hours: Optional[float] = None
    air_temp_dry_05m: Optional[float] = None
    air_temp_wet_05m: Optional[float] = None
    air_temp_dry_12m: Optional[float] = None
    air_temp_wet_12m: Optional[float] = None
    air_temp_dry_22m: Optional[float] = None
    air_temp_wet_22m: Optional[float] = None
    min_temp: Optional[float] = None
    max_temp: Optional[float] = None
    mean_temp: Optional[float] = None
    grass_min_temp: Optional[float] = None
    soil_temp_5cm: Optional[float] = None
    soil_temp_10cm: Optional[float] = None
    soil_temp_20cm: Optional[float] = None
    soil_temp_30cm: Optional[float] = None
    soil_temp_50cm: Optional[float] = None
    soil_moisture_0_20cm: Optional[float] = None
    soil_moisture_20_50cm: Optional[float] = None
    pan_water_evap: Optional[float] = None
    relative_humidity: Optional[float] = None
    evaporation: Optional[float] = None
    dew_point: Optional[float] = None
    wind_speed: Optional[float] = None
    duration: Optional[float] = None
    rainfall: Optional[float] = None


class AgroclimatologicalPage(BaseSchema):
    items: List[Agroclimatological]
    total: int
    limit: int
    offset: int
    has_more: bool
