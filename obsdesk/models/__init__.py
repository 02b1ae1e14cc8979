# Database models package

from obsdesk.models.base import BaseModel
from obsdesk.models.station import Station
from obsdesk.models.user import User, UserRole, UserSession
from obsdesk.models.observing_time import ObservingTime
from obsdesk.models.meteorological_entry import MeteorologicalEntry
from obsdesk.models.weather_observation import WeatherObservation
from obsdesk.models.daily_summary import DailySummary
from obsdesk.models.agro import AgroclimatologicalRecord, SunshineRecord, SoilMoistureRecord
from obsdesk.models.synoptic_code import SynopticCode
from obsdesk.models.audit_log import AuditLog

__all__ = [
    "BaseModel",
    "Station",
    "User",
    "UserRole",
    "UserSession",
    "ObservingTime",
    "MeteorologicalEntry",
    "WeatherObservation",
    "DailySummary",
    "SunshineRecord",
    "SoilMoistureRecord",
    "AgroclimatologicalRecord",
    "SynopticCode",
    "AuditLog",
]

# Configure all mappers after all models are imported
# This resolves bidirectional relationships defined with string references
from sqlalchemy.orm import configure_mappers
configure_mappers()
