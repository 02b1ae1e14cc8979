"""
Synoptic code schemas.
"""

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, StringConstraints, model_validator

from obsdesk.schemas.base import IDSchema, TimestampSchema
from obsdesk.utils.synoptic_code import GROUP_COUNT, SYNOPTIC_GROUP_FIELDS

CodeGroup = Optional[Annotated[str, StringConstraints(max_length=255)]]


class SynopticCodeCreate(BaseModel):
    """
    Save the synoptic report of a slot.

    The report is generated from the slot's cards. ``measurements`` may
    correct individual groups; a null entry keeps the generated group.
    """
    hour: Optional[str] = Field(None, description="Synoptic hour code; latest slot of today when omitted")
    measurements: Optional[List[CodeGroup]] = Field(None, min_length=GROUP_COUNT, max_length=GROUP_COUNT)
    weather_remark: Optional[str] = Field(None, max_length=255)


class SynopticCodeUpdate(BaseModel):
    """Correct groups of a stored report; null entries are left unchanged."""
    measurements: Optional[List[CodeGroup]] = Field(None, min_length=GROUP_COUNT, max_length=GROUP_COUNT)
    weather_remark: Optional[str] = Field(None, max_length=255)


class SynopticCodePreview(BaseModel):
    """Generated report, not yet stored."""
    observing_time_id: int
    utc_time: datetime
    data_type: str
    station_no: str
    year: str
    month: str
    day: str
    weather_remark: str
    measurements: List[str]


class SynopticCode(IDSchema, TimestampSchema):
    """Stored report with its 21 groups in report order."""
    observing_time_id: int
    station_id: int
    user_id: Optional[int] = None
    data_type: str
    weather_remark: str = ""
    measurements: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def collect_groups(cls, data):
        if isinstance(data, dict):
            return data
        return {
            "id": data.id,
            "created_at": data.created_at,
            "updated_at": data.updated_at,
            "observing_time_id": data.observing_time_id,
            "station_id": data.station_id,
            "user_id": data.user_id,
            "data_type": data.data_type,
            "weather_remark": data.weather_remark or "",
            "measurements": [getattr(data, field) or "" for field in SYNOPTIC_GROUP_FIELDS],
        }
