"""
Config Loader
=============

Reads config.yaml into a Settings object.

FIRST RUN:
---------
If there is no config file yet, we write one full of defaults (with a freshly
generated espkey) and stop. The operator fills in the real database
credentials and relaunches. An existing file is never overwritten.

WHERE IS THE FILE?
-----------------
1. The path passed to load_settings(), if any
2. The SOIL_SENSOR_CONFIG environment variable (a .env file works too)
3. ./config.yaml

Author: Soil Sensor API Team
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from soil_sensor_api.models import Settings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.yaml")
CONFIG_PATH_ENV = "SOIL_SENSOR_CONFIG"


class ConfigError(Exception):
    """The config file could not be created, read or validated."""


class ConfigCreatedError(ConfigError):
    """A default config file was just written; the operator must edit it."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(
            f"Config file was not found, created {path}. "
            "Please modify the settings in the file and relaunch the program"
        )


def resolve_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Work out which config file to use."""
    if path is not None:
        return Path(path)
    load_dotenv()
    return Path(os.getenv(CONFIG_PATH_ENV, str(DEFAULT_CONFIG_PATH)))


def write_default_config(path: Union[str, Path]) -> Settings:
    """
    Create a config file filled with default values.

    The file is opened in exclusive mode, so an existing config is never
    clobbered.

    Args:
        path: Where to write the file

    Returns:
        The default settings that were written (including the new espkey)

    Raises:
        ConfigError: If the file exists already or cannot be written
    """
    path = Path(path)
    settings = Settings()

    try:
        with open(path, "x", encoding="utf-8") as f:
            yaml.safe_dump(settings.to_yaml_dict(), f, default_flow_style=False, sort_keys=False)
    except FileExistsError:
        raise ConfigError(f"Refusing to overwrite existing config file {path}")
    except OSError as e:
        raise ConfigError(f"Creating config file error: {e}") from e

    logger.info(f"Wrote default config to {path}")
    return settings


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings from the YAML config file.

    Keys are matched case-insensitively. Missing keys fall back to their
    defaults and unknown keys are ignored.

    Raises:
        ConfigCreatedError: No config existed; a default one was written
        ConfigError: The file is unreadable, not YAML, or has invalid values
    """
    path = resolve_config_path(path)
    logger.info(f"Reading config file {path}")

    if not path.exists():
        logger.warning("Config file is not found, creating new one.")
        write_default_config(path)
        raise ConfigCreatedError(path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file {path} is not valid YAML: {e}") from e
    except OSError as e:
        raise ConfigError(f"Reading config file error: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping of settings")

    data = {str(k).lower(): v for k, v in raw.items()}

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    if "espkey" not in data:
        # Same as a fresh install: nobody knows this key, so nothing can ingest
        logger.warning("No espkey in config file, using a random key for this run")

    return settings
