"""
Utility modules for the soil sensor API.
"""

from soil_sensor_api.utils.validation import (
    validate_table_name,
    validate_port,
    validate_measurement,
    generate_device_key,
)

__all__ = [
    "validate_table_name",
    "validate_port",
    "validate_measurement",
    "generate_device_key",
]
