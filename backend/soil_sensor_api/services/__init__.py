"""
Services Package
================

These are the "workers" that do the actual work.

- config_loader: Reads (or bootstraps) config.yaml
- ReadingStore: Writes readings to the database
"""

from .config_loader import (
    ConfigError,
    ConfigCreatedError,
    load_settings,
    write_default_config,
)
from .reading_store import ReadingStore, StorageError

__all__ = [
    "ConfigError",
    "ConfigCreatedError",
    "load_settings",
    "write_default_config",
    "ReadingStore",
    "StorageError",
]
