"""
Station schemas.
"""

from typing import Optional

from pydantic import Field

from obsdesk.schemas.base import BaseSchema, IDSchema, TimestampSchema


class StationBase(BaseSchema):
    """Base weather station schema."""
    name: str = Field(..., min_length=1, max_length=200)
    station_code: str = Field(..., min_length=1, max_length=50, description="Unique station code")
    latitude: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in degrees")


class StationCreate(StationBase):
    """Schema for creating a weather station."""
    security_code: str = Field(..., min_length=1, max_length=100)


class StationUpdate(BaseSchema):
    """Schema for updating weather station information."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    station_code: Optional[str] = Field(None, min_length=1, max_length=50)
    security_code: Optional[str] = Field(None, min_length=1, max_length=100)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class Station(StationBase, IDSchema, TimestampSchema):
    """Complete weather station schema (security code never returned)."""
    pass


class StationLocation(IDSchema):
    """Station position for the map."""
    name: str
    station_code: str
    latitude: float
    longitude: float
