"""
Observing time database model.

One row per station per synoptic UTC hour. The unique constraint on
(station_id, utc_time) is what arbitrates two concurrent first-card
submissions for the same slot.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from obsdesk.models.base import BaseModel


class ObservingTime(BaseModel):
    """
    A synoptic observation slot instance.

    Created with the first-card submission, never updated. First- and
    second-card entries attach to it by foreign key.
    """

    __tablename__ = "observing_times"

    station_id = Column(
        Integer,
        ForeignKey("stations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Reference to the weather station"
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        comment="User whose submission created the slot"
    )
    utc_time = Column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        comment="Synoptic hour in UTC (00, 03, ... 21 on the hour)"
    )
    local_time = Column(
        DateTime(timezone=True),
        nullable=False,
        comment="Same instant in station local time"
    )

    # Relationships
    station = relationship("Station", back_populates="observing_times")
    user = relationship("User")
    meteorological_entries = relationship(
        "MeteorologicalEntry",
        back_populates="observing_time",
        cascade="all, delete-orphan",
        order_by="MeteorologicalEntry.id"
    )
    weather_observations = relationship(
        "WeatherObservation",
        back_populates="observing_time",
        cascade="all, delete-orphan",
        order_by="WeatherObservation.id"
    )
    daily_summaries = relationship("DailySummary", back_populates="observing_time")
    synoptic_codes = relationship(
        "SynopticCode",
        back_populates="observing_time",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        UniqueConstraint('station_id', 'utc_time', name='uq_observing_time_station_utc'),
    )

    def __repr__(self):
        return f"<ObservingTime(station_id={self.station_id}, utc_time={self.utc_time})>"
