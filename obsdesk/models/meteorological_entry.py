"""
First-card (meteorological entry) database model.

Instrument readings taken at the synoptic hour. Values are kept exactly as
the observer typed them; the daily aggregator parses what it needs.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from obsdesk.models.base import BaseModel


class MeteorologicalEntry(BaseModel):
    """
    First-stage entry of an observation slot.

    Immutable once created.
    """

    __tablename__ = "meteorological_entries"

    observing_time_id = Column(
        Integer,
        ForeignKey("observing_times.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    data_type = Column(String(10), default="")

    # Pressure
    sub_indicator = Column(String(20), default="")
    altered_thermometer = Column(String(20), default="")
    bar_as_read = Column(String(20), default="", comment="Barometer as read (hPa)")
    corrected_for_index = Column(String(20), default="")
    height_difference = Column(String(20), default="")
    correction_for_temp = Column(String(20), default="")
    station_level_pressure = Column(String(20), default="", comment="Station level pressure (hPa)")
    sea_level_reduction = Column(String(20), default="")
    corrected_sea_level_pressure = Column(String(20), default="", comment="Mean sea level pressure (hPa)")
    afternoon_reading = Column(String(20), default="")
    pressure_change_24h = Column(String(20), default="")

    # Temperature
    dry_bulb_as_read = Column(String(20), default="")
    wet_bulb_as_read = Column(String(20), default="")
    max_min_temp_as_read = Column(String(20), default="", comment="Max (day) or min (night) thermometer reading")
    dry_bulb_corrected = Column(String(20), default="")
    wet_bulb_corrected = Column(String(20), default="")
    max_min_temp_corrected = Column(String(20), default="")

    # Humidity
    dew_point_temperature = Column(String(20), default="", comment="Td")
    relative_humidity = Column(String(20), default="")

    # Squall
    squall_confirmed = Column(String(10), default="")
    squall_force = Column(String(20), default="")
    squall_direction = Column(String(20), default="")
    squall_time = Column(String(20), default="")

    # Visibility and weather
    horizontal_visibility = Column(String(20), default="")
    misc_meteors = Column(String(100), default="")
    past_weather_w1 = Column(String(10), default="")
    past_weather_w2 = Column(String(10), default="")
    present_weather_ww = Column(String(10), default="")
    c2_indicator = Column(String(10), default="")

    submitted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    observing_time = relationship("ObservingTime", back_populates="meteorological_entries")

    def __repr__(self):
        return f"<MeteorologicalEntry(id={self.id}, observing_time_id={self.observing_time_id})>"
