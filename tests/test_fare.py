"""Tests for fare estimation."""

import pytest

from ride_dispatch.fare import FareCalculator, estimate_fare
from ride_dispatch.ride import GeoPoint
from ride_dispatch.service_class import ServiceClass
from tests.factories import north_of


@pytest.fixture
def calculator():
    return FareCalculator()


@pytest.mark.unit
class TestFareCalculator:
    def test_ten_km_car_trip(self, calculator):
        fare = calculator.calculate(10.0, ServiceClass.CAR)
        assert fare.base_fee == 10.0
        assert fare.distance_charge == 25.0
        assert fare.total_fare == 35.0

    def test_motorcycle_rates(self, calculator):
        fare = calculator.calculate(10.0, "motorcycle")
        assert fare.service_class == ServiceClass.MOTORCYCLE
        assert fare.total_fare == pytest.approx(20.0)

    def test_zero_distance_charges_base_fee(self, calculator):
        assert calculator.calculate(0.0, ServiceClass.CAR).total_fare == 10.0

    def test_negative_distance_rejected(self, calculator):
        with pytest.raises(ValueError, match="non-negative"):
            calculator.calculate(-1.0, ServiceClass.CAR)

    def test_unknown_service_class_rejected(self, calculator):
        with pytest.raises(ValueError):
            calculator.calculate(3.0, "helicopter")

    def test_repeated_calls_are_identical(self, calculator):
        assert calculator.calculate(7.3, "car") == calculator.calculate(7.3, "car")


@pytest.mark.unit
class TestEstimateFare:
    def test_uses_straight_line_distance(self):
        pickup = GeoPoint(latitude=0.3136, longitude=32.5811)
        destination = GeoPoint(latitude=north_of(0.3136, 10.0), longitude=32.5811)

        fare = estimate_fare(pickup, destination, ServiceClass.CAR)

        assert fare.distance_km == pytest.approx(10.0)
        assert fare.total_fare == pytest.approx(35.0)

    def test_deterministic(self):
        pickup = GeoPoint(latitude=-23.5505, longitude=-46.6333)
        destination = GeoPoint(latitude=-23.5629, longitude=-46.6544)

        first = estimate_fare(pickup, destination, "motorcycle")
        second = estimate_fare(pickup, destination, "motorcycle")

        assert first == second
