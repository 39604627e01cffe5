"""
Device Pydantic schemas
"""

from pydantic import BaseModel, ConfigDict, Field


class DeviceInfo(BaseModel):
    """Device as listed by the registry for one report run"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Device name")
    udid: str = Field(..., description="Unique device identifier, also the measurement stream key")
    template_name: str = Field(..., description="Name of the device template")
