# KPI package
from .metrics import METRICS, MEASUREMENTS
from .statistics import expected_count, valid_percentage, validity_percentages
from .status import STATUS_THRESHOLD, EMPTY_BATTERY_LEVEL, classify_status

__all__ = [
    'METRICS', 'MEASUREMENTS',
    'expected_count', 'valid_percentage', 'validity_percentages',
    'STATUS_THRESHOLD', 'EMPTY_BATTERY_LEVEL', 'classify_status',
]
