"""
Measurement statistics Pydantic schemas
"""

from pydantic import BaseModel, Field
from typing import Dict, Optional
from datetime import datetime


class MeasurementWindowStats(BaseModel):
    """Counts over one device's trailing window, computed fresh each run"""
    last_timestamp: Optional[datetime] = Field(None, description="Timestamp of the most recent row at or before now")
    last_battery_level: Optional[float] = Field(None, description="Battery level of the most recent row")
    row_count: int = Field(0, ge=0, description="Rows inside the window")
    valid_counts: Dict[str, int] = Field(default_factory=dict, description="Rows passing each metric's sanity bound")
    future_row_count: int = Field(0, ge=0, description="Rows timestamped after now")
