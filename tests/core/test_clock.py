"""Tests for the injectable clocks."""

from datetime import UTC, datetime, timedelta

from ride_dispatch.core.clock import FixedClock, SystemClock, utc_now


class TestSystemClock:
    def test_returns_naive_utc(self):
        now = SystemClock().now()
        assert now.tzinfo is None

    def test_close_to_utc_now(self):
        expected = datetime.now(UTC).replace(tzinfo=None)
        assert abs(SystemClock().now() - expected) < timedelta(seconds=5)


class TestFixedClock:
    def test_frozen_until_moved(self):
        start = datetime(2024, 1, 15, 12, 0)
        clock = FixedClock(start)
        assert clock.now() == start
        assert clock.now() == start

    def test_advance(self):
        clock = FixedClock(datetime(2024, 1, 15, 12, 0))
        moved = clock.advance(minutes=11)
        assert moved == datetime(2024, 1, 15, 12, 11)
        assert clock.now() == moved

    def test_set(self):
        clock = FixedClock(datetime(2024, 1, 15, 12, 0))
        clock.set(datetime(2025, 6, 1))
        assert clock.now() == datetime(2025, 6, 1)


def test_utc_now_is_naive():
    assert utc_now().tzinfo is None
