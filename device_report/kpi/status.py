"""
Device status classification
"""

from datetime import datetime, timezone
from typing import Mapping, Optional

from device_report.kpi.metrics import MEASUREMENTS, METRICS

STATUS_THRESHOLD = 0.95
EMPTY_BATTERY_LEVEL = 3600

STATUS_OK = "OK"
STATUS_NO_UPLOADS = "No uploads."
STATUS_EMPTY_BATTERY_SUFFIX = " Probably due to empty battery."
STATUS_GAPS = "Gaps in measurements."
STATUS_PROBLEMS_PREFIX = "Problems with: "


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def classify_status(
    percentages: Mapping[str, float],
    last_timestamp: Optional[datetime],
    last_battery_level: Optional[float],
    window_start: datetime,
    threshold: float = STATUS_THRESHOLD,
) -> str:
    """Map a device's validity percentages to a human readable status.

    Rules are evaluated in order and the first match wins:

    1. No rows at all: "No uploads.", with an empty battery hint when the
       last reading predates the window and reported a low battery.
    2. Row coverage below ``threshold``: "Gaps in measurements."
    3. Every metric at or above ``threshold``: "OK", otherwise the metrics
       below it are listed in declaration order.
    """
    measurements = percentages.get(MEASUREMENTS, 0)

    if measurements == 0:
        status = STATUS_NO_UPLOADS
        if (
            last_timestamp is not None
            and last_battery_level is not None
            and as_utc(last_timestamp) < as_utc(window_start)
            and last_battery_level < EMPTY_BATTERY_LEVEL
        ):
            status += STATUS_EMPTY_BATTERY_SUFFIX
        return status

    if measurements < threshold:
        return STATUS_GAPS

    problems = [
        metric.label
        for metric in METRICS
        if percentages.get(metric.key, 0) < threshold
    ]
    if not problems:
        return STATUS_OK
    return STATUS_PROBLEMS_PREFIX + ", ".join(problems)
