"""
Slot eligibility schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from obsdesk.schemas.observations import MeteorologicalEntry


class TimeCheckRequest(BaseModel):
    hour: str = Field(..., description="Synoptic hour code: 00, 03, ... 21")


class YesterdayData(BaseModel):
    first_stage_entries: List[MeteorologicalEntry] = []


class SlotDecisionResponse(BaseModel):
    """Which card may be submitted now for the requested hour."""
    allow_first_card: bool
    allow_second_card: bool
    message: str
    time: Optional[datetime] = None
    yesterday: YesterdayData


class TodaySlot(BaseModel):
    """One of today's observation slots and what has been filed for it."""
    id: int
    hour: str
    utc_time: datetime
    local_time: datetime
    has_first_stage_entry: bool
    has_second_stage_entry: bool
    has_daily_summary: bool
