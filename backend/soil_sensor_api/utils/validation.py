"""
Input Validation Utilities
===========================

Validation helpers for configuration values and inbound readings.

Author: Soil Sensor API Team
"""

import math
import re
import uuid


# A bare identifier, optionally qualified by a schema ("readings", "garden.readings")
_TABLE_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]{0,63}(\.[A-Za-z_][A-Za-z0-9_]{0,63})?")


def validate_table_name(name: str) -> bool:
    """
    Validate a table name that will be interpolated into an SQL statement.

    Only plain identifiers are allowed, so the name can never carry
    quoting, whitespace or a second statement.

    Args:
        name: Table name from the config file (e.g., "table1")

    Returns:
        True if valid, False otherwise
    """
    if not name:
        return False
    return bool(_TABLE_NAME_PATTERN.fullmatch(name))


def validate_port(port: int) -> bool:
    """
    Validate a TCP port number.

    Args:
        port: Port number

    Returns:
        True if valid, False otherwise
    """
    return 1 <= port <= 65535


def validate_measurement(value: float) -> bool:
    """Reject NaN and infinities; every finite number is a valid sample."""
    return math.isfinite(value)


def generate_device_key() -> str:
    """Generate a fresh random shared key for a new config file."""
    return str(uuid.uuid4())
