"""
Models Package
==============

Data structures used across the API.
Import from here instead of the individual files.

Example:
    from soil_sensor_api.models import Reading, Settings
"""

from .reading import Reading, server_timestamp
from .settings import Settings

__all__ = [
    "Reading",
    "server_timestamp",
    "Settings",
]
