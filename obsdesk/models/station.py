"""
Weather station database model.

A station is the tenant boundary: every observing time, entry, summary and
agroclimatological record belongs to exactly one station.
"""

from sqlalchemy import Column, String, Float
from sqlalchemy.orm import relationship

from obsdesk.models.base import BaseModel


class Station(BaseModel):
    """
    Weather station information.

    Each station has a unique WMO station code and a security code that
    station-bound users must present when signing in.
    """

    __tablename__ = "stations"

    name = Column(String(200), nullable=False, index=True, comment="Station name")
    station_code = Column(String(50), unique=True, index=True, nullable=False, comment="Unique station code (WMO index)")
    security_code = Column(String(100), nullable=False, comment="Code required at sign-in for station-bound users")
    latitude = Column(Float, nullable=False, comment="Latitude in degrees")
    longitude = Column(Float, nullable=False, comment="Longitude in degrees")

    # Relationships
    users = relationship("User", back_populates="station")
    observing_times = relationship(
        "ObservingTime",
        back_populates="station",
        cascade="all, delete-orphan"
    )
    daily_summaries = relationship(
        "DailySummary",
        back_populates="station",
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Station(id={self.id}, station_code='{self.station_code}', name='{self.name}')>"
