"""
Model Tests - Reading shape and helpers
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from soil_sensor_api.models import Reading, server_timestamp
from soil_sensor_api.utils import validate_port, validate_table_name


class TestReading:

    def test_key_defaults_to_empty(self):
        reading = Reading.model_validate({"temperature": 1, "humidity": 2})

        assert reading.key == ""
        assert reading.temperature == 1.0

    def test_is_immutable(self):
        reading = Reading(key="abc", temperature=1.0, humidity=2.0)

        with pytest.raises(ValidationError):
            reading.temperature = 3.0

    @pytest.mark.parametrize("field", ["temperature", "humidity", "light", "moisture"])
    def test_rejects_infinity(self, field):
        data = {"temperature": 1.0, "humidity": 2.0, field: float("inf")}

        with pytest.raises(ValidationError):
            Reading.model_validate(data)


class TestServerTimestamp:

    def test_format(self):
        now = datetime(2026, 10, 18, 14, 3, 22, 123456, tzinfo=timezone(timedelta(hours=2)))

        assert server_timestamp(now) == "2026-10-18T14:03:22+02:00"

    def test_default_is_local_now(self):
        stamp = datetime.fromisoformat(server_timestamp())

        assert stamp.tzinfo is not None
        assert abs((datetime.now(timezone.utc) - stamp).total_seconds()) < 5


class TestValidation:

    @pytest.mark.parametrize("name", ["table1", "readings", "garden.readings", "_t"])
    def test_valid_table_names(self, name):
        assert validate_table_name(name)

    @pytest.mark.parametrize("name", ["", "1table", "my table", "t;", "a.b.c", "`t`", "table1\n", "a.b\n"])
    def test_invalid_table_names(self, name):
        assert not validate_table_name(name)

    def test_ports(self):
        assert validate_port(1)
        assert validate_port(65535)
        assert not validate_port(0)
        assert not validate_port(65536)
