"""
Sample registry and measurement data for local runs
"""

import random
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

from device_report.database.connection import DataSource, init_database
from device_report.models.device import Device, Template
from device_report.models.measurement import Measurement

logger = structlog.get_logger(__name__)

SAMPLE_TEMPLATES = ["Weather station", "Rain gauge"]

# name, udid, template, fraction of expected uploads, battery level
SAMPLE_DEVICES = [
    ("Station Harbour", "WS-0001", "Weather station", 1.0, 4100),
    ("Station Hilltop", "WS-0002", "Weather station", 0.8, 3900),
    ("Station Meadow", "WS-0003", "Weather station", 0.0, 3400),
    ("Gauge Riverside", "RG-0001", "Rain gauge", 1.0, 4000),
]


def _reading(udid: str, timestamp: datetime, battery: float, rng: random.Random) -> Measurement:
    return Measurement(
        udid=udid,
        timestamp=timestamp,
        temperature=round(rng.uniform(-5, 30), 1),
        humidity=round(rng.uniform(30, 100), 1),
        rainfall=round(rng.uniform(0, 5), 1),
        wind_direction=rng.randrange(0, 360),
        wind_speed=round(rng.uniform(0, 20), 1),
        gust_direction=rng.randrange(0, 360),
        gust_speed=round(rng.uniform(0, 30), 1),
        pressure=round(rng.uniform(980, 1040), 1),
        battery=battery,
    )


def create_sample_data(
    source: DataSource,
    now: Optional[datetime] = None,
    days: int = 7,
    seed: Optional[int] = None,
) -> int:
    """Create tables, sample devices and readings every 5 minutes; returns readings added"""
    init_database(source)
    now = now or datetime.now(timezone.utc)
    rng = random.Random(seed)

    registry = source.registry_session()
    try:
        templates = {}
        for name in SAMPLE_TEMPLATES:
            template = registry.query(Template).filter(Template.name == name).first()
            if not template:
                template = Template(name=name)
                registry.add(template)
            templates[name] = template
        registry.flush()

        for name, udid, template_name, _, _ in SAMPLE_DEVICES:
            existing = registry.query(Device).filter(Device.udid == udid).first()
            if not existing:
                registry.add(Device(name=name, udid=udid, template_id=templates[template_name].id))
        registry.commit()
    except Exception:
        registry.rollback()
        raise
    finally:
        registry.close()
    logger.info("Sample devices created", devices=len(SAMPLE_DEVICES))

    readings = 0
    measurements = source.measurement_session()
    try:
        slots = days * 24 * 12
        for _, udid, _, coverage, battery in SAMPLE_DEVICES:
            if coverage == 0:
                # Last upload well before the window
                measurements.add(_reading(udid, now - timedelta(days=days + 3), battery, rng))
                readings += 1
                continue
            for i in range(int(slots * coverage)):
                measurements.add(_reading(udid, now - timedelta(minutes=i * 5), battery, rng))
                readings += 1
        measurements.commit()
    except Exception:
        measurements.rollback()
        raise
    finally:
        measurements.close()

    logger.info("Sample measurements created", readings=readings)
    return readings
