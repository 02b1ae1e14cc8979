"""
Audit log database model.

Who did what to which record. Written by obsdesk.services.audit.
"""

from sqlalchemy import JSON, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from obsdesk.models.base import BaseModel


class AuditLog(BaseModel):
    __tablename__ = "audit_logs"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True, comment="Actor")
    station_id = Column(Integer, ForeignKey("stations.id", ondelete="SET NULL"), nullable=True, index=True)
    actor_email = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, comment="Actor role at the time of the action")
    action = Column(String(20), nullable=False, comment="CREATE, UPDATE or DELETE")
    module = Column(String(50), nullable=False, index=True)
    action_text = Column(String(500), nullable=False)
    target_id = Column(String(50), nullable=True)
    target_email = Column(String(255), nullable=True)
    details = Column(JSON, nullable=True)

    user = relationship("User")

    def __repr__(self):
        return f"<AuditLog(id={self.id}, module='{self.module}', action='{self.action}')>"
