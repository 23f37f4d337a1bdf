"""
Application context: everything a request handler needs, built once at startup.
"""

from dataclasses import dataclass

from soil_sensor_api.models import Settings
from soil_sensor_api.services import ReadingStore


@dataclass(frozen=True)
class AppContext:
    settings: Settings
    store: ReadingStore
