"""
Audit log schemas.
"""

from typing import Any, List, Optional

from obsdesk.schemas.base import IDSchema, PageMeta, TimestampSchema


class AuditLog(IDSchema, TimestampSchema):
    user_id: Optional[int] = None
    station_id: Optional[int] = None
    actor_email: str
    role: str
    action: str
    module: str
    action_text: str
    target_id: Optional[str] = None
    target_email: Optional[str] = None
    details: Optional[Any] = None


class AuditLogPage(PageMeta):
    items: List[AuditLog]
