"""Tests for settings loading and validation."""

import pytest

from ride_dispatch.settings import DatabaseSettings, MatchingSettings, Settings


@pytest.mark.unit
class TestMatchingSettings:
    def test_defaults(self):
        settings = MatchingSettings()
        assert settings.search_radius_km == 10.0
        assert settings.discovery_freshness_minutes == 10.0
        assert settings.availability_freshness_minutes == 5.0
        assert settings.claim_drivers is False
        assert settings.offer_timeout_seconds == 15

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError, match="must sum to 1.0"):
            MatchingSettings(distance_weight=0.9)

    def test_rebalanced_weights_accepted(self):
        settings = MatchingSettings(distance_weight=0.40, rating_weight=0.15)
        assert settings.distance_weight == 0.40

    def test_availability_window_within_discovery_window(self):
        with pytest.raises(ValueError, match="cannot exceed"):
            MatchingSettings(availability_freshness_minutes=15.0)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("MATCHING_SEARCH_RADIUS_KM", "5")
        monkeypatch.setenv("MATCHING_CLAIM_DRIVERS", "true")
        monkeypatch.setenv("MATCHING_OFFER_TIMEOUT_SECONDS", "45")
        settings = MatchingSettings()
        assert settings.search_radius_km == 5.0
        assert settings.claim_drivers is True
        assert settings.offer_timeout_seconds == 45


@pytest.mark.unit
class TestDatabaseSettings:
    def test_rejects_plain_path(self):
        with pytest.raises(ValueError):
            DatabaseSettings(url="data/dispatch.db")


@pytest.mark.unit
class TestSettings:
    def test_nested_env(self, monkeypatch):
        monkeypatch.setenv("API_KEY", "secret")
        monkeypatch.setenv("LOG_FORMAT", "json")
        settings = Settings()
        assert settings.api.key == "secret"
        assert settings.logging.format == "json"
