"""Shared pytest fixtures for chaindb unit and integration tests."""
from __future__ import annotations

from collections.abc import Iterator

import pytest

from chaindb import session
from chaindb.config import get_settings
from chaindb.database import Database
from chaindb.drivers.sqlite import SQLiteDriver
from chaindb.schema.snapshot import SchemaSnapshot
from tests.fixtures import RecordingDriver, load_ddl, load_schema_snapshot


@pytest.fixture(autouse=True)
def _isolate_process_state() -> Iterator[None]:
    """Every test starts without a current Database or cached settings."""
    session.clear_active()
    get_settings.cache_clear()
    yield
    session.clear_active()
    get_settings.cache_clear()


@pytest.fixture(scope="session")
def snapshot() -> SchemaSnapshot:
    """Sample shop schema snapshot shared across all tests."""
    return load_schema_snapshot()


@pytest.fixture
def driver() -> RecordingDriver:
    return RecordingDriver()


@pytest.fixture
def db(driver: RecordingDriver) -> Iterator[Database]:
    """Database over the recording driver (sqlite dialect, ``?`` placeholders)."""
    with Database(driver) as database:
        yield database


@pytest.fixture
def shop_db() -> Iterator[Database]:
    """In-memory SQLite Database loaded with the sample shop data."""
    sqlite_driver = SQLiteDriver(":memory:")
    sqlite_driver.connection.executescript(load_ddl("sqlite"))
    with Database(sqlite_driver) as database:
        yield database
