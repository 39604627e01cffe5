"""
Per-device statistics over a trailing measurement window
"""

from datetime import datetime

import structlog
from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError

from device_report.core.exceptions import QueryError
from device_report.database.connection import DataSource
from device_report.kpi.metrics import METRICS
from device_report.models.measurement import Measurement
from device_report.schemas.stats import MeasurementWindowStats

logger = structlog.get_logger(__name__)


def get_window_stats(source: DataSource, udid: str, window_start: datetime, now: datetime) -> MeasurementWindowStats:
    """
    Count rows and sane values for one device's stream in [window_start, now].

    Args:
        source: Data source handle
        udid: Measurement stream key
        window_start: Inclusive start of the trailing window
        now: Inclusive end of the window; later rows count as future rows

    Returns:
        Window statistics for the device

    Raises:
        QueryError: If any of the queries fail, tagged with the udid
    """
    session = source.measurement_session()
    try:
        stream = session.query(Measurement).filter(Measurement.udid == udid)

        # count(CASE ...) skips NULL, so NULL values and failed bounds both drop out
        window_counts = (
            session.query(
                func.count(Measurement.id).label("row_count"),
                *[
                    func.count(case((metric.condition(getattr(Measurement, metric.key)), 1))).label(metric.key)
                    for metric in METRICS
                ],
            )
            .filter(
                Measurement.udid == udid,
                Measurement.timestamp >= window_start,
                Measurement.timestamp <= now,
            )
            .one()
        )

        last = (
            session.query(Measurement.timestamp, Measurement.battery)
            .filter(Measurement.udid == udid, Measurement.timestamp <= now)
            .order_by(Measurement.timestamp.desc())
            .first()
        )

        future_row_count = stream.filter(Measurement.timestamp > now).count()
    except SQLAlchemyError as e:
        logger.error("Measurement query failed", udid=udid, error=str(e))
        raise QueryError(f"Measurement query failed for device {udid}: {e}", udid=udid) from e
    finally:
        session.close()

    stats = MeasurementWindowStats(
        last_timestamp=last.timestamp if last else None,
        last_battery_level=last.battery if last else None,
        row_count=window_counts.row_count,
        valid_counts={metric.key: getattr(window_counts, metric.key) for metric in METRICS},
        future_row_count=future_row_count,
    )
    logger.debug("Window stats computed", udid=udid, rows=stats.row_count, future_rows=stats.future_row_count)
    return stats
