"""
Shared fixtures: an in-memory SQLite table standing in for the MySQL one.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from soil_sensor_api.context import AppContext
from soil_sensor_api.main import create_app
from soil_sensor_api.models import Settings
from soil_sensor_api.services import ReadingStore


TEST_KEY = "abc"
TEST_TABLE = "readings"


@pytest.fixture
def engine():
    """A single shared SQLite connection with the expected readings schema."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    with engine.begin() as conn:
        conn.execute(text(
            f"CREATE TABLE {TEST_TABLE} ("
            "time TEXT, temperature REAL, humidity REAL, light REAL, moisture REAL)"
        ))
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return ReadingStore(engine, TEST_TABLE)


@pytest.fixture
def settings():
    return Settings(esp_key=TEST_KEY, db_table=TEST_TABLE)


def make_client(settings, store):
    return TestClient(create_app(AppContext(settings=settings, store=store)))


@pytest.fixture
def client(settings, store):
    with make_client(settings, store) as client:
        yield client


@pytest.fixture
def fetch_rows(engine):
    """Callable returning every stored row as a dict."""
    def _fetch():
        with engine.connect() as conn:
            result = conn.execute(text(
                f"SELECT time, temperature, humidity, light, moisture FROM {TEST_TABLE}"
            ))
            return [dict(row._mapping) for row in result]
    return _fetch
