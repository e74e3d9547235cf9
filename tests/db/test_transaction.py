"""Tests for transaction utilities."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from ride_dispatch.db.schema import Base, DriverProfile
from ride_dispatch.db.transaction import transaction


@pytest.fixture
def session_maker():
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)


@pytest.mark.unit
class TestTransaction:
    def test_commits_on_success(self, session_maker):
        with session_maker() as session, transaction(session):
            session.add(DriverProfile(id="d1", rating=4.5))

        with session_maker() as session:
            assert session.get(DriverProfile, "d1").rating == 4.5

    def test_rolls_back_on_exception(self, session_maker):
        with pytest.raises(RuntimeError), session_maker() as session, transaction(session):
            session.add(DriverProfile(id="d2", rating=4.5))
            session.flush()
            raise RuntimeError("boom")

        with session_maker() as session:
            assert session.get(DriverProfile, "d2") is None
