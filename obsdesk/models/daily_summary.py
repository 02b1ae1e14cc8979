"""
Daily summary database model.

Holds the 16 aggregated measurements for one station and one UTC day.
Each recompute appends a new row; readers take the latest (highest id) row
for a (station, date) pair.
"""

from sqlalchemy import Column, Date, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from obsdesk.models.base import BaseModel


class DailySummary(BaseModel):
    """Aggregated daily synoptic summary."""

    __tablename__ = "daily_summaries"

    station_id = Column(
        Integer,
        ForeignKey("stations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Reference to the weather station"
    )
    observing_time_id = Column(
        Integer,
        ForeignKey("observing_times.id", ondelete="SET NULL"),
        nullable=True,
        comment="Latest observing time of the day when the summary was computed"
    )
    date = Column(Date, nullable=False, index=True, comment="Summary date (UTC)")
    data_type = Column(String(10), nullable=False, default="SY")

    # Measurements, slot order 0..15
    av_station_pressure = Column(String(20), default="")
    av_sea_level_pressure = Column(String(20), default="")
    av_dry_bulb_temperature = Column(String(20), default="")
    av_wet_bulb_temperature = Column(String(20), default="")
    max_temperature = Column(String(20), default="")
    min_temperature = Column(String(20), default="")
    total_precipitation = Column(String(20), default="")
    av_dew_point_temperature = Column(String(20), default="")
    av_relative_humidity = Column(String(20), default="")
    wind_speed = Column(String(20), default="")
    wind_direction_code = Column(String(20), default="")
    max_wind_speed = Column(String(20), default="")
    max_wind_direction = Column(String(20), default="")
    av_total_cloud = Column(String(20), default="")
    lowest_visibility = Column(String(20), default="")
    total_rain_duration = Column(String(20), default="")

    # Relationships
    station = relationship("Station", back_populates="daily_summaries")
    observing_time = relationship("ObservingTime", back_populates="daily_summaries")

    __table_args__ = (
        Index('idx_daily_summary_station_date', 'station_id', 'date'),
    )

    def __repr__(self):
        return f"<DailySummary(station_id={self.station_id}, date={self.date})>"
