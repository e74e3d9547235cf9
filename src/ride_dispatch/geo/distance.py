"""Great-circle distance and travel-time estimates.

Distances use the Haversine formula on a spherical Earth. ETAs assume a flat
average city speed per service class; there is no routing engine behind them.
"""

from math import atan2, ceil, cos, radians, sin, sqrt

from ride_dispatch.service_class import ServiceClass

EARTH_RADIUS_KM = 6371.0

# Average city-traffic speed in km/h
AVERAGE_SPEED_KMH: dict[ServiceClass, float] = {
    ServiceClass.CAR: 20.0,
    ServiceClass.MOTORCYCLE: 25.0,
}

PICKUP_BUFFER_MINUTES = 3
MINIMUM_ETA_MINUTES = 5


def haversine_distance_km(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate the great-circle distance between two points in kilometers.

    Args:
        lat1: Latitude of first point in degrees
        lon1: Longitude of first point in degrees
        lat2: Latitude of second point in degrees
        lon2: Longitude of second point in degrees

    Returns:
        Distance between the two points in kilometers
    """
    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def eta_minutes(
    from_lat: float,
    from_lon: float,
    to_lat: float,
    to_lon: float,
    service_class: ServiceClass | str = ServiceClass.CAR,
) -> int:
    """Estimate travel time in whole minutes between two points.

    Travel minutes are rounded up, a fixed pickup/dropoff buffer is added,
    and the result never drops below MINIMUM_ETA_MINUTES.

    Args:
        from_lat: Latitude of the origin in degrees
        from_lon: Longitude of the origin in degrees
        to_lat: Latitude of the destination in degrees
        to_lon: Longitude of the destination in degrees
        service_class: Vehicle category; two-wheelers move faster in traffic

    Returns:
        Estimated minutes, at least MINIMUM_ETA_MINUTES
    """
    speed_kmh = AVERAGE_SPEED_KMH[ServiceClass(service_class)]
    distance_km = haversine_distance_km(from_lat, from_lon, to_lat, to_lon)
    travel_minutes = ceil(distance_km / speed_kmh * 60)
    return max(travel_minutes + PICKUP_BUFFER_MINUTES, MINIMUM_ETA_MINUTES)
