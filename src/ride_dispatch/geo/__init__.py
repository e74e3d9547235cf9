from .distance import (
    AVERAGE_SPEED_KMH,
    EARTH_RADIUS_KM,
    MINIMUM_ETA_MINUTES,
    PICKUP_BUFFER_MINUTES,
    eta_minutes,
    haversine_distance_km,
)

__all__ = [
    "AVERAGE_SPEED_KMH",
    "EARTH_RADIUS_KM",
    "MINIMUM_ETA_MINUTES",
    "PICKUP_BUFFER_MINUTES",
    "haversine_distance_km",
    "eta_minutes",
]
