"""
Reading Store
=============

Appends readings to the configured MySQL table.

The table itself is created by whoever owns the database - we only insert.
Expected columns:

    time         VARCHAR / DATETIME   - server timestamp (ISO-8601 with offset)
    temperature  FLOAT
    humidity     FLOAT
    light        FLOAT NULL
    moisture     FLOAT NULL

One shared SQLAlchemy engine (with its connection pool) serves every request;
the pool hands each concurrent insert its own connection.

Author: Soil Sensor API Team
"""

import logging
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from soil_sensor_api.models import Reading, Settings, server_timestamp
from soil_sensor_api.utils.validation import validate_table_name

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """The database could not be opened or a reading could not be stored."""


class ReadingStore:
    """
    Thin wrapper around the insert statement.

    HOW TO USE:
    ----------
    store = ReadingStore.from_settings(settings)
    store.insert_reading(reading)   # raises StorageError on failure
    store.dispose()                 # at shutdown
    """

    COLUMNS = ("time", "temperature", "humidity", "light", "moisture")

    def __init__(self, engine: Engine, table: str):
        """
        Args:
            engine: SQLAlchemy engine to insert through
            table: Table to append readings to (plain identifier)
        """
        if not validate_table_name(table):
            raise StorageError(f"Invalid table name: {table!r}")

        self.engine = engine
        self.table = table

        columns = ",".join(self.COLUMNS)
        placeholders = ",".join(f":{c}" for c in self.COLUMNS)
        self.insert_statement = text(
            f"INSERT INTO {table} ({columns}) VALUES({placeholders})"
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReadingStore":
        """
        Open a pooled MySQL engine from the config.

        Like any pool, nothing connects until the first query; this only
        fails for problems it can see up front (bad URL, missing driver).

        Raises:
            StorageError: If the engine cannot be created
        """
        url = URL.create(
            "mysql+pymysql",
            username=settings.db_username,
            password=settings.db_password,
            host=settings.db_address,
            port=settings.db_port,
            database=settings.db_name,
            query={"charset": "utf8"},
        )

        logger.info(f"Establishing connection to MySQL server: {settings.db_address}:{settings.db_port}")
        try:
            engine = create_engine(url, pool_pre_ping=True)
        except (SQLAlchemyError, ImportError) as e:
            raise StorageError(f"Establishing connection to MySQL server error: {e}") from e

        return cls(engine, settings.db_table)

    def insert_reading(self, reading: Reading, timestamp: Optional[str] = None) -> None:
        """
        Append one row for a reading.

        Args:
            reading: The validated reading
            timestamp: Override the server timestamp (defaults to now)

        Raises:
            StorageError: If the insert fails
        """
        params = {
            "time": timestamp or server_timestamp(),
            "temperature": reading.temperature,
            "humidity": reading.humidity,
            "light": reading.light,
            "moisture": reading.moisture,
        }

        try:
            with self.engine.begin() as conn:
                conn.execute(self.insert_statement, params)
        except SQLAlchemyError as e:
            raise StorageError(f"Executing insert into {self.table} failed: {e}") from e

        logger.debug(f"Stored reading at {params['time']} in {self.table}")

    def ping(self) -> bool:
        """Check that the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    def dispose(self) -> None:
        """Close all pooled connections."""
        self.engine.dispose()
