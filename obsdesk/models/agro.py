"""
Agroclimatological database models.

Sunshine duration (one record per station per day, upserted), soil
moisture readings and the daily agroclimatological form.
"""

from sqlalchemy import JSON, Column, Date, DateTime, Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from obsdesk.models.base import BaseModel


class SunshineRecord(BaseModel):
    """Hourly sunshine duration for one station and day."""

    __tablename__ = "sunshine_records"

    station_id = Column(Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    date = Column(Date, nullable=False, index=True)
    hours = Column(JSON, nullable=False, comment="24 hourly sunshine fractions")
    total = Column(Float, nullable=False, comment="Total sunshine hours")

    station = relationship("Station")

    __table_args__ = (
        UniqueConstraint('station_id', 'date', name='uq_sunshine_station_date'),
    )

    def __repr__(self):
        return f"<SunshineRecord(station_id={self.station_id}, date={self.date}, total={self.total})>"


class SoilMoistureRecord(BaseModel):
    """
    Gravimetric soil moisture reading.

    w1..w3 are tin weights (empty, wet soil, dry soil); ws/ds are the wet
    and dry soil masses and sm the resulting moisture percentage.
    """

    __tablename__ = "soil_moisture_records"

    station_id = Column(Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    date = Column(Date, nullable=False, index=True)
    depth = Column(Integer, nullable=False, comment="Sample depth (cm)")
    w1 = Column(Float, nullable=True)
    w2 = Column(Float, nullable=True)
    w3 = Column(Float, nullable=True)
    ws = Column(Float, nullable=True)
    ds = Column(Float, nullable=True)
    sm = Column(Float, nullable=True)

    station = relationship("Station")

    def __repr__(self):
        return f"<SoilMoistureRecord(station_id={self.station_id}, date={self.date}, depth={self.depth})>"


class AgroclimatologicalRecord(BaseModel):
    """
    Daily agroclimatological form of a station.

    Air temperatures are dry/wet bulb pairs at 0.5, 1.2 and 2.2 m; soil
    temperatures are taken at 5 to 50 cm and soil moisture over two layers.
    """

    __tablename__ = "agroclimatological_records"

    station_id = Column(Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    date = Column(Date, nullable=False, index=True)
    utc_time = Column(DateTime(timezone=True), nullable=False, comment="Time of submission (UTC)")
    elevation = Column(Float, nullable=False, default=0, comment="Station elevation (m)")

    # Solar and sunshine
    solar_radiation = Column(Float, nullable=True)
    sunshine_hours = Column(Float, nullable=True)

    # Air temperature (°C)
    air_temp_dry_05m = Column(Float, nullable=True)
    air_temp_wet_05m = Column(Float, nullable=True)
    air_temp_dry_12m = Column(Float, nullable=True)
    air_temp_wet_12m = Column(Float, nullable=True)
    air_temp_dry_22m = Column(Float, nullable=True)
    air_temp_wet_22m = Column(Float, nullable=True)

    min_temp = Column(Float, nullable=True)
    max_temp = Column(Float, nullable=True)
    mean_temp = Column(Float, nullable=True)
    grass_min_temp = Column(Float, nullable=True)

    # Soil temperature (°C)
    soil_temp_5cm = Column(Float, nullable=True)
    soil_temp_10cm = Column(Float, nullable=True)
    soil_temp_20cm = Column(Float, nullable=True)
    soil_temp_30cm = Column(Float, nullable=True)
    soil_temp_50cm = Column(Float, nullable=True)

    # Soil moisture (%)
    soil_moisture_0_20cm = Column(Float, nullable=True)
    soil_moisture_20_50cm = Column(Float, nullable=True)

    # Humidity and evaporation
    pan_water_evap = Column(Float, nullable=True)
    relative_humidity = Column(Float, nullable=True)
    evaporation = Column(Float, nullable=True)
    dew_point = Column(Float, nullable=True)

    wind_speed = Column(Float, nullable=True)
    duration = Column(Float, nullable=True, comment="Rain duration (hours)")
    rainfall = Column(Float, nullable=True, comment="Rainfall (mm)")

    station = relationship("Station")

    __table_args__ = (
        UniqueConstraint('station_id', 'date', name='uq_agroclimatological_station_date'),
    )

    def __repr__(self):
        return f"<AgroclimatologicalRecord(station_id={self.station_id}, date={self.date})>"
