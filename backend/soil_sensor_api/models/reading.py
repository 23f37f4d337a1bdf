"""
Reading Models
==============
Pydantic models for the data devices send us.

A device (an ESPHome / ESP32 board in the garden) POSTs one JSON object per
sample:

    POST /create
    {
        "key": "<shared key from config.yaml>",
        "temperature": 21.5,
        "humidity": 55.2,
        "light": 312.0,        # optional
        "moisture": 41.7       # optional
    }

The timestamp is NOT sent by the device - the server stamps each reading
when it is stored.

Author: Soil Sensor API Team
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from soil_sensor_api.utils.validation import validate_measurement


class Reading(BaseModel):
    """
    One sensor sample submitted by a remote device.

    Readings are immutable once received: they are validated, written to the
    table and then dropped. Unknown fields in the JSON body are ignored.

    Fields:
        key: Shared secret the device echoes back (empty if not sent)
        temperature: Air temperature
        humidity: Relative humidity
        light: Light level, if the device has a light sensor
        moisture: Soil moisture, if the device has a moisture probe
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    key: str = Field(default="", description="Shared secret configured as espkey")
    temperature: float = Field(..., description="Temperature reading", examples=[21.5])
    humidity: float = Field(..., description="Relative humidity reading", examples=[55.2])
    light: Optional[float] = Field(None, description="Light level (optional)")
    moisture: Optional[float] = Field(None, description="Soil moisture (optional)")

    @field_validator("temperature", "humidity", "light", "moisture")
    @classmethod
    def _finite(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and not validate_measurement(value):
            raise ValueError("must be a finite number")
        return value


def server_timestamp(now: Optional[datetime] = None) -> str:
    """
    Timestamp a reading the way it is stored in the `time` column.

    ISO-8601 in the server's local timezone, with offset, to the second:
    e.g. "2026-10-18T14:03:22+02:00".
    """
    now = now or datetime.now()
    return now.astimezone().isoformat(timespec="seconds")
