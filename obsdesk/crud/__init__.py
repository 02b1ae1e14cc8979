# CRUD operations package

from obsdesk.crud.base import CRUDBase
from obsdesk.crud.station import CRUDStation, station
from obsdesk.crud.user import CRUDUser, CRUDUserSession, user, user_session
from obsdesk.crud.observation import CRUDObservingTime, observing_time
from obsdesk.crud.daily_summary import CRUDDailySummary, daily_summary
from obsdesk.crud.agro import (
    CRUDAgroclimatological, CRUDSoilMoisture, CRUDSunshine, agroclimatological, soil_moisture, sunshine,
)
from obsdesk.crud.synoptic_code import CRUDSynopticCode, synoptic_code
from obsdesk.crud.audit_log import CRUDAuditLog, audit_log

__all__ = [
    "CRUDBase",
    "CRUDStation", "station",
    "CRUDUser", "CRUDUserSession", "user", "user_session",
    "CRUDObservingTime", "observing_time",
    "CRUDDailySummary", "daily_summary",
    "CRUDSunshine", "CRUDSoilMoisture", "sunshine", "soil_moisture",
    "CRUDAgroclimatological", "agroclimatological",
    "CRUDSynopticCode", "synoptic_code",
    "CRUDAuditLog", "audit_log",
]
