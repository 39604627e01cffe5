"""
Validity percentages over a trailing measurement window.

A device is expected to upload one reading every five minutes. For each
metric the number of rows passing its sanity bound is compared with that
expectation and expressed as a fraction, rounded half up to three decimals
and capped at 1.0. Rounding happens before the cap, so a metric can read
exactly 1.0 but never more, even when a device uploads more often than
expected.
"""

import math
from typing import Dict

from device_report.kpi.metrics import MEASUREMENTS, METRICS
from device_report.schemas.stats import MeasurementWindowStats

READINGS_PER_HOUR = 12


def expected_count(window_days: int) -> int:
    """Number of readings expected in a window of ``window_days`` days"""
    return window_days * 24 * READINGS_PER_HOUR


def valid_percentage(count: int, expected: int) -> float:
    """Fraction of ``expected`` covered by ``count``, in [0, 1].

    Raises:
        ValueError: If expected is not positive
    """
    if expected <= 0:
        raise ValueError(f"expected count must be positive, got {expected}")
    rounded = math.floor(count * 1000 / expected + 0.5) / 1000
    return min(rounded, 1.0)


def validity_percentages(stats: MeasurementWindowStats, window_days: int) -> Dict[str, float]:
    """Percentages for the synthetic ``measurements`` metric and every tracked metric.

    The mapping is ordered: ``measurements`` first, then metrics in
    declaration order. Metrics missing from ``stats.valid_counts`` count as 0.
    """
    expected = expected_count(window_days)
    percentages = {MEASUREMENTS: valid_percentage(stats.row_count, expected)}
    for metric in METRICS:
        percentages[metric.key] = valid_percentage(stats.valid_counts.get(metric.key, 0), expected)
    return percentages
