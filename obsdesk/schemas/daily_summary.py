"""
Daily summary schemas.
"""

from datetime import date as DateType
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from obsdesk.schemas.base import BaseSchema, IDSchema, TimestampSchema
from obsdesk.utils.aggregation import MEASUREMENT_FIELDS


class DailySummaryComputeRequest(BaseModel):
    """Recompute request; defaults to today and the caller's station."""
    date: Optional[DateType] = None
    station_id: Optional[int] = None


class DailySummary(IDSchema, TimestampSchema):
    """Stored daily summary with its 16 measurements in slot order."""
    station_id: int
    observing_time_id: Optional[int] = None
    date: DateType
    data_type: str
    measurements: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def collect_measurements(cls, data):
        if isinstance(data, dict):
            return data
        # ORM row: gather the 16 measurement columns in slot order
        return {
            "id": data.id,
            "created_at": data.created_at,
            "updated_at": data.updated_at,
            "station_id": data.station_id,
            "observing_time_id": data.observing_time_id,
            "date": data.date,
            "data_type": data.data_type,
            "measurements": [getattr(data, field) or "" for field in MEASUREMENT_FIELDS],
        }


class DailySummaryComputed(BaseSchema):
    """Recompute result: the stored row plus the printable header."""
    summary: DailySummary
    station_no: str
    year: str
    month: str
    day: str
