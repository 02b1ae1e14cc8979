# Pydantic schemas package

from obsdesk.schemas.base import BaseSchema, TimestampSchema, IDSchema, PageMeta, Reading
from obsdesk.schemas.auth import SignInRequest, SessionUser, Token, TokenResponse
from obsdesk.schemas.station import Station, StationCreate, StationUpdate, StationLocation
from obsdesk.schemas.observations import (
    FirstCardCreate, SecondCardCreate,
    MeteorologicalEntry, WeatherObservation, ObservingTime,
    SubmissionResponse,
)
from obsdesk.schemas.time_check import TimeCheckRequest, SlotDecisionResponse, TodaySlot
from obsdesk.schemas.daily_summary import DailySummary, DailySummaryComputeRequest, DailySummaryComputed
from obsdesk.schemas.synoptic_code import SynopticCode, SynopticCodeCreate, SynopticCodePreview, SynopticCodeUpdate

__all__ = [
    # Base schemas
    "BaseSchema", "TimestampSchema", "IDSchema", "PageMeta", "Reading",

    # Auth schemas
    "SignInRequest", "SessionUser", "Token", "TokenResponse",

    # Station schemas
    "Station", "StationCreate", "StationUpdate", "StationLocation",

    # Observation schemas
    "FirstCardCreate", "SecondCardCreate",
    "MeteorologicalEntry", "WeatherObservation", "ObservingTime",
    "SubmissionResponse",
    "TimeCheckRequest", "SlotDecisionResponse", "TodaySlot",
    "DailySummary", "DailySummaryComputeRequest", "DailySummaryComputed",
    "SynopticCode", "SynopticCodeCreate", "SynopticCodePreview", "SynopticCodeUpdate",
]
