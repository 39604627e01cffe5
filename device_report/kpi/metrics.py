"""
Tracked measurement metrics and their sanity bounds
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Metric:
    """A measurement column with the upper bound a sane value must stay under"""
    key: str
    label: str
    column_title: str
    bound: float
    inclusive: bool = False

    def condition(self, column):
        """SQL expression that holds for sane values; NULL never matches"""
        return column <= self.bound if self.inclusive else column < self.bound


# Synthetic metric for row-count coverage
MEASUREMENTS = "measurements"

# Declaration order is the order used in status messages and report columns
METRICS = (
    Metric("temperature", "temperature", "Temperature", 300),
    Metric("humidity", "humidity", "Humidity", 100, inclusive=True),
    Metric("rainfall", "rainfall", "Rainfall", 300),
    Metric("wind_direction", "wind direction", "Wind direction", 360),
    Metric("wind_speed", "wind speed", "Wind speed", 1000),
    Metric("gust_direction", "gust direction", "Gust direction", 360),
    Metric("gust_speed", "gust speed", "Gust speed", 1000),
    Metric("pressure", "pressure", "Pressure", 2000),
    Metric("battery", "battery level", "Battery level", 5000),
)
