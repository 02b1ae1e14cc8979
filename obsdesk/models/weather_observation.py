"""
Second-card (weather observation) database model.

Clouds, rainfall and wind observed at the synoptic hour. Creating this
entry closes the observation slot for good.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from obsdesk.models.base import BaseModel


class WeatherObservation(BaseModel):
    """Second-stage entry of an observation slot."""

    __tablename__ = "weather_observations"

    observing_time_id = Column(
        Integer,
        ForeignKey("observing_times.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    observer_initial = Column(String(20), nullable=True)
    card_indicator = Column(String(5), default="2")

    # Clouds by level
    low_cloud_form = Column(String(20), nullable=True)
    low_cloud_height = Column(String(20), nullable=True)
    low_cloud_amount = Column(String(20), nullable=True)
    low_cloud_direction = Column(String(20), nullable=True)
    medium_cloud_form = Column(String(20), nullable=True)
    medium_cloud_height = Column(String(20), nullable=True)
    medium_cloud_amount = Column(String(20), nullable=True)
    medium_cloud_direction = Column(String(20), nullable=True)
    high_cloud_form = Column(String(20), nullable=True)
    high_cloud_height = Column(String(20), nullable=True)
    high_cloud_amount = Column(String(20), nullable=True)
    high_cloud_direction = Column(String(20), nullable=True)
    total_cloud_amount = Column(String(20), nullable=True, comment="Total cloud amount (octas)")

    # Significant cloud layers
    layer1_form = Column(String(20), nullable=True)
    layer1_height = Column(String(20), nullable=True)
    layer1_amount = Column(String(20), nullable=True)
    layer2_form = Column(String(20), nullable=True)
    layer2_height = Column(String(20), nullable=True)
    layer2_amount = Column(String(20), nullable=True)
    layer3_form = Column(String(20), nullable=True)
    layer3_height = Column(String(20), nullable=True)
    layer3_amount = Column(String(20), nullable=True)
    layer4_form = Column(String(20), nullable=True)
    layer4_height = Column(String(20), nullable=True)
    layer4_amount = Column(String(20), nullable=True)

    # Rainfall
    rainfall_time_start = Column(DateTime(timezone=True), nullable=True)
    rainfall_time_end = Column(DateTime(timezone=True), nullable=True)
    rainfall_since_previous = Column(String(20), nullable=True)
    rainfall_during_previous = Column(String(20), nullable=True)
    rainfall_last_24_hours = Column(String(20), nullable=True, comment="Rainfall in last 24 hours (mm)")
    is_intermittent_rain = Column(Boolean, nullable=True)

    # Wind
    wind_first_anemometer = Column(String(20), nullable=True)
    wind_second_anemometer = Column(String(20), nullable=True)
    wind_speed = Column(String(20), nullable=True, comment="Wind speed (knots)")
    wind_direction = Column(String(20), nullable=True, comment="Wind direction code")

    submitted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    observing_time = relationship("ObservingTime", back_populates="weather_observations")

    def __repr__(self):
        return f"<WeatherObservation(id={self.id}, observing_time_id={self.observing_time_id})>"
