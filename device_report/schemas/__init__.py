# Schemas package
from .device import DeviceInfo
from .stats import MeasurementWindowStats

__all__ = ['DeviceInfo', 'MeasurementWindowStats']
