"""Shared builders for registry and measurement test data"""

from datetime import datetime, timedelta, timezone

from device_report.database.connection import DataSource, init_database, make_engine
from device_report.models.device import Device, Template
from device_report.models.measurement import Measurement

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_memory_source() -> DataSource:
    """Registry and measurement store as two in-memory sqlite databases"""
    source = DataSource(
        registry=make_engine("sqlite:///:memory:"),
        measurements=make_engine("sqlite:///:memory:"),
    )
    init_database(source)
    return source


def add_devices(source: DataSource, devices):
    """Insert (name, udid, template name) tuples into the registry"""
    session = source.registry_session()
    try:
        templates = {}
        for name, udid, template_name in devices:
            if template_name not in templates:
                templates[template_name] = Template(name=template_name)
                session.add(templates[template_name])
                session.flush()
            session.add(Device(name=name, udid=udid, template_id=templates[template_name].id))
        session.commit()
    finally:
        session.close()


def add_measurements(source: DataSource, rows):
    """Insert Measurement keyword dicts into the measurement store"""
    session = source.measurement_session()
    try:
        for row in rows:
            session.add(Measurement(**row))
        session.commit()
    finally:
        session.close()


def full_reading(udid: str, timestamp: datetime, **overrides):
    """A reading where every metric is inside its sanity bound"""
    reading = {
        "udid": udid,
        "timestamp": timestamp,
        "temperature": 21.5,
        "humidity": 60.0,
        "rainfall": 0.0,
        "wind_direction": 180.0,
        "wind_speed": 3.2,
        "gust_direction": 190.0,
        "gust_speed": 5.1,
        "pressure": 1013.0,
        "battery": 4100.0,
    }
    reading.update(overrides)
    return reading


def every_five_minutes(udid: str, end: datetime, count: int, **overrides):
    return [full_reading(udid, end - timedelta(minutes=5 * i), **overrides) for i in range(count)]


