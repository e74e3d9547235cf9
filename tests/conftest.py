from datetime import datetime
from typing import TYPE_CHECKING

import pytest

from ride_dispatch.core.clock import FixedClock
from ride_dispatch.db.database import init_database
from ride_dispatch.db.sql_store import SqlDispatchStore
from ride_dispatch.dispatch_logging import LogContext
from ride_dispatch.settings import MatchingSettings
from tests.factories import DispatchFactory

if TYPE_CHECKING:
    from faker.proxy import Faker

# Fixed instant used as "now" across matching and lifecycle tests
NOW = datetime(2024, 1, 15, 12, 0, 0)


@pytest.fixture(autouse=True)
def clear_log_context():
    """Reset thread-local logging context between tests."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def factory() -> DispatchFactory:
    """Factory for domain objects with seeded Faker."""
    return DispatchFactory(seed=42)


@pytest.fixture
def fake(factory: DispatchFactory) -> "Faker":
    """Seeded Faker instance for deterministic test data."""
    return factory.fake


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def matching_settings() -> MatchingSettings:
    return MatchingSettings()


@pytest.fixture
def temp_sqlite_db(tmp_path):
    """Temporary SQLite database URL for persistence tests."""
    return f"sqlite:///{tmp_path / 'test_dispatch.db'}"


@pytest.fixture
def session_factory(temp_sqlite_db):
    return init_database(temp_sqlite_db)


@pytest.fixture
def store(session_factory, clock) -> SqlDispatchStore:
    """SQLite-backed store sharing the test clock."""
    return SqlDispatchStore(session_factory, clock)
