from pydantic import BaseModel, Field

from ride_dispatch.geo.distance import haversine_distance_km
from ride_dispatch.ride import GeoPoint
from ride_dispatch.service_class import ServiceClass


class FareBreakdown(BaseModel):
    """Detailed breakdown of fare components."""

    service_class: ServiceClass
    distance_km: float = Field(ge=0)
    base_fee: float = Field(ge=0)
    distance_charge: float = Field(ge=0)
    total_fare: float = Field(ge=0)


class FareCalculator:
    """Estimates ride fares from trip distance and service class.

    Amounts are in a nominal currency unit; formatting is left to the caller.
    """

    BASE_FEES: dict[ServiceClass, float] = {
        ServiceClass.CAR: 10.0,
        ServiceClass.MOTORCYCLE: 5.0,
    }
    PER_KM_RATES: dict[ServiceClass, float] = {
        ServiceClass.CAR: 2.5,
        ServiceClass.MOTORCYCLE: 1.5,
    }

    def calculate(self, distance_km: float, service_class: ServiceClass | str) -> FareBreakdown:
        """
        Calculate the fare estimate for a trip.

        The estimate is fixed at request time; identical inputs always yield
        identical output so retries stay idempotent.
        """
        if distance_km < 0:
            raise ValueError("Distance must be non-negative")

        service_class = ServiceClass(service_class)
        base_fee = self.BASE_FEES[service_class]
        distance_charge = distance_km * self.PER_KM_RATES[service_class]

        return FareBreakdown(
            service_class=service_class,
            distance_km=distance_km,
            base_fee=base_fee,
            distance_charge=distance_charge,
            total_fare=base_fee + distance_charge,
        )


def estimate_fare(
    pickup: GeoPoint,
    destination: GeoPoint,
    service_class: ServiceClass | str,
    calculator: FareCalculator | None = None,
) -> FareBreakdown:
    """Estimate the fare for the straight-line trip between two points."""
    distance_km = haversine_distance_km(
        pickup.latitude, pickup.longitude, destination.latitude, destination.longitude
    )
    return (calculator or FareCalculator()).calculate(distance_km, service_class)
