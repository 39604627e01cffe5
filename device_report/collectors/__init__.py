# Collectors package
from .device_collector import list_devices
from .measurement_collector import get_window_stats

__all__ = ['list_devices', 'get_window_stats']
