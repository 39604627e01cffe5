"""
Measurement model for time-series sensor readings
"""

from sqlalchemy import BigInteger, Column, DateTime, Float, Index, Integer, String
from device_report.database.connection import MeasurementBase


class Measurement(MeasurementBase):
    """One reading of a device's measurement stream"""

    __tablename__ = "measurements"
    __table_args__ = (
        Index("ix_measurements_udid_timestamp", "udid", "timestamp"),
    )

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    udid = Column(String(255), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    temperature = Column(Float)
    humidity = Column(Float)
    rainfall = Column(Float)
    wind_direction = Column(Float)
    wind_speed = Column(Float)
    gust_direction = Column(Float)
    gust_speed = Column(Float)
    pressure = Column(Float)
    battery = Column(Float)

    def __repr__(self):
        return f"<Measurement(udid={self.udid}, timestamp={self.timestamp})>"
