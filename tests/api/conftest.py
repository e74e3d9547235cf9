import pytest
from fastapi.testclient import TestClient

from ride_dispatch.api import create_app
from ride_dispatch.settings import APISettings, MatchingSettings, Settings

API_KEY = "test-api-key"


@pytest.fixture
def settings():
    return Settings(api=APISettings(key=API_KEY))


@pytest.fixture
def app(store, settings, clock):
    return create_app(store, settings, clock)


@pytest.fixture
def test_client(app):
    return TestClient(app)


@pytest.fixture
def auth_headers():
    return {"X-API-Key": API_KEY}


@pytest.fixture
def claiming_client(store, clock):
    settings = Settings(api=APISettings(key=API_KEY), matching=MatchingSettings(claim_drivers=True))
    return TestClient(create_app(store, settings, clock))
