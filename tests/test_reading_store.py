"""
Storage Tests - ReadingStore against an in-memory SQLite table
"""

import pytest

from soil_sensor_api.models import Reading, Settings
from soil_sensor_api.services import ReadingStore, StorageError

from conftest import TEST_TABLE


def make_reading(**overrides) -> Reading:
    data = {"key": "abc", "temperature": 21.5, "humidity": 55.2}
    data.update(overrides)
    return Reading(**data)


class TestInsertStatement:

    def test_names_five_columns_and_five_placeholders(self, store):
        sql = str(store.insert_statement)

        assert sql == (
            f"INSERT INTO {TEST_TABLE} (time,temperature,humidity,light,moisture) "
            "VALUES(:time,:temperature,:humidity,:light,:moisture)"
        )

    def test_every_placeholder_gets_a_value(self, store, fetch_rows):
        store.insert_reading(make_reading(light=10.0, moisture=20.0), timestamp="2026-10-18T12:00:00+00:00")

        assert fetch_rows() == [{
            "time": "2026-10-18T12:00:00+00:00",
            "temperature": 21.5,
            "humidity": 55.2,
            "light": 10.0,
            "moisture": 20.0,
        }]

    @pytest.mark.parametrize("table", ["", "readings; DROP TABLE x", "1readings", "a b", "readings\n"])
    def test_rejects_unsafe_table_names(self, engine, table):
        with pytest.raises(StorageError):
            ReadingStore(engine, table)


class TestInsertReading:

    def test_server_timestamp_has_offset(self, store, fetch_rows):
        store.insert_reading(make_reading())

        stamp = fetch_rows()[0]["time"]
        assert stamp[-6] in "+-"
        assert stamp[-3] == ":"

    def test_failure_raises_storage_error(self, engine):
        store = ReadingStore(engine, "no_such_table")

        with pytest.raises(StorageError):
            store.insert_reading(make_reading())

    def test_ping(self, store):
        assert store.ping() is True


class TestFromSettings:

    def test_builds_mysql_url(self):
        settings = Settings(
            db_username="garden",
            db_password="s3cret",
            db_address="db.local",
            db_port=3307,
            db_name="sensors",
            db_table="soil_readings",
            esp_key="abc",
        )

        store = ReadingStore.from_settings(settings)
        try:
            url = store.engine.url
            assert url.drivername == "mysql+pymysql"
            assert url.username == "garden"
            assert url.password == "s3cret"
            assert url.host == "db.local"
            assert url.port == 3307
            assert url.database == "sensors"
            assert url.query["charset"] == "utf8"
            assert store.table == "soil_readings"
        finally:
            store.dispose()
